"""
TclScript Demo

Runs a short script through the interpreter and shows its output, the
final value, and how output survives a failing statement.
"""
import sys
sys.path.insert(0, '.')
from api.interpreter import TclInterpreter, TracingInterpreter
from compiler.errors import DivisionByZeroError

SCRIPT = '''
# compute an area
set width 6
set height [expr $width / 2]
puts "area: [expr $width * $height]"
{
    set width 100
    puts "inner width: $width"
}
puts "outer width: $width"
expr ($width + $height) * 2
'''


def main():
    print('=== TclScript Demo ===')
    print()

    interp = TracingInterpreter.from_source(SCRIPT, '<demo>')
    result = interp.run()
    print('[1] Output:')
    print(interp.output)
    print(f'[2] Result: {result}')
    print(f'[3] Executed {len(interp.trace)} commands')
    print()

    failing = TclInterpreter.from_source('puts before; expr 5 / 0; puts after')
    try:
        failing.run()
    except DivisionByZeroError as e:
        print(f'[4] Error: {e}')
    print(f'[5] Output kept: {failing.output!r}')

    assert result.to_python() == 18


if __name__ == '__main__':
    main()
