# moonlib

Building blocks for a small scripting-language runtime. They are written in
pure Python and have no third-party dependencies.

## Modules

- `moonlib.opcodes` covers the 32-bit instruction format.
  - `OpCode`, `OpMode` and `OpArgMask` describe the instruction set.
  - `create_abc`, `create_abx`, `create_asbx` and `create_ax` encode instructions. They raise `ValueError` when an operand is out of range.
  - `get_opcode`/`set_opcode`, `get_a`/`set_a`, `get_b`/`set_b`, `get_c`/`set_c`, `get_bx`/`set_bx`, `get_sbx`/`set_sbx` and `get_ax`/`set_ax` read or replace one field. They return a new integer.
  - `is_k`, `index_k` and `rk_as_k` handle register/constant (RK) operands.
  - `op_mode`, `b_mode`, `c_mode`, `sets_a`, `is_test` and `opname` describe each opcode.
- `moonlib.memory` covers array growth and block sizes.
  - `grow_size(size, limit, what)` doubles a capacity, to at least 4 and at most `limit`. It raises `LimitError` once `limit` is reached.
  - `check_block_size(count, elem_size)` returns a byte size. It raises `BlockTooBigError` if that size would overflow.
- `moonlib.exprdesc` holds the descriptors a parser passes around: `ExpKind`, the `ExpDesc` dataclass (with `has_jumps()`), `LabelDesc`, `is_var` and `is_in_reg`.
- `moonlib.objects` holds helpers over values.
  - `int2fb` and `fb2int` handle the "floating point byte" encoding.
  - `ceil_log2`.
  - `arith` does IEEE arithmetic over `ArithOp`. Its modulo is floored.
  - `hexa_value`.
  - `str2number` parses decimal and hexadecimal numerals, including `p` exponents. It rejects `inf`, `nan` and trailing text with `ValueError`.
  - `format_message` formats with `%s %d %f %c %p %%`.
  - `chunkid` builds source names for error messages.
- `moonlib.mathlib` is the math library.
  - `log` takes an optional base. There are also `deg`, `rad`, `modf`, `frexp`, `ldexp`, `fmod`, `minimum` and `maximum`.
  - `Random` is a seedable generator with `random(*args)` and `seed(value)`.
  - `open_math()` builds the whole table, including `pi` and `huge`.
  - Arguments may be numbers or numeric strings. Anything else raises `TypeError`.
- `moonlib.oslib` is the os library.
  - `date(fmt, t)` accepts `!` for UTC and `*t` for a field table. It checks conversion specifiers through `check_option`.
  - `time(table)`, `difftime`, `clock` and `getenv`.
  - `remove`, `rename` and `tmpname` raise `OSError` on failure.
  - `execute` runs a shell command and returns `(success, "exit" | "signal", code)`.
  - `setlocale`.
  - `exit` raises `SystemExit`.
  - `open_os()` builds the table.
- `moonlib.package` covers module search and loading.
  - `searchpath` walks `;`-separated templates and raises `FileNotFoundError` listing every file tried.
  - `make_path` merges an environment value with a default, where `;;` stands for the default.
  - `Package` holds `path`, `cpath`, `loaded`, `preload` and `searchers`. It provides `require`, `loadlib`, `close` and the searchers `searcher_preload`, `searcher_lua`, `searcher_c` and `searcher_croot`.
  - It raises `ModuleNotFound` and `LoadError`.

## Example

```python
from moonlib.opcodes import OpCode, create_abc, get_b, opname
from moonlib.objects import int2fb, fb2int, str2number, chunkid
from moonlib.mathlib import open_math
from moonlib.package import Package

ins = create_abc(OpCode.ADD, 1, 2, 3)
assert get_b(ins) == 2
assert opname(OpCode.ADD) == "ADD"

assert fb2int(int2fb(100)) >= 100
assert str2number("0x10") == 16.0
print(chunkid("@script.lua", 60))   # script.lua

math = open_math()
print(math["max"](3, 7, 5))          # 7.0

pkg = Package(path="./?.lua", cpath="./?.so", ignore_environment=True)
pkg.preload["greet"] = lambda name, extra: {"hello": "world"}
print(pkg.require("greet"))          # {'hello': 'world'}
```

## What it does not do

The package has no lexer, parser, code generator or virtual machine. It cannot
run scripts, and it provides no command-line interpreter.

`Package.searcher_lua` needs a `chunk_loader` callable that turns a file name
into a loader. Without one, loading a source file raises `LoadError`.

Native libraries are not opened by the package itself. `loadlib` and the C
searchers work only through a `library_opener` callable that you supply, which
returns a mapping of names to functions. Without one they report that dynamic
libraries are not enabled.

## Tests

```
pip install -e .[test]
pytest
```