# xv6kit

xv6kit models, in plain Python, the parts of a small RISC-V teaching
operating system that do not need real hardware, so they can be explored
and tested on their own. It has no dependencies beyond the standard
library and supports Python 3.10 and later.

## What is in it

- **`xv6kit.vm`**: Sv39 page tables over simulated RAM.
  - `PhysicalMemory(npages, base=0x80000000)` is page-granular memory with
    `kalloc`, `kfree`, `read`, `write`, `load_pte`, `store_pte` and
    `free_count`. Freshly allocated and freed pages are filled with junk
    bytes, as a kernel allocator would.
  - `PageTable.create(memory)` builds an empty table. Its methods are
    `walk`, `walkaddr`, `map_pages`, `unmap`, `init_user`, `grow`,
    `shrink`, `free_walk`, `free`, `copy_to`, `clear_user`, `copy_out`,
    `copy_in` and `copy_in_str`.
  - Broken invariants (remapping a page, unaligned unmaps, freeing a table
    that still has leaves) raise `KernelPanic`. Running out of pages
    raises `OutOfMemoryError`. Touching a user address that is not mapped
    for user access raises `BadAddressError`.
- **`xv6kit.riscv`**: paging arithmetic (`pg_round_up`, `pg_round_down`,
  `pa2pte`, `pte2pa`, `pte_flags`, `px`, `make_satp`), PTE and
  control-register bit constants, `MAXVA`, and the kernel parameters
  (`NPROC`, `MAXARG`, `MAXPATH`, `FSSIZE` and the rest).
- **`xv6kit.elf`**: `ElfHeader` and `ProgramHeader` dataclasses with
  `parse`, `pack`, `is_valid` and `is_loadable`. `program_headers(data, header)`
  returns the program headers of an image. Short or malformed input raises
  `ElfFormatError`.
- **`xv6kit.printf`**: `sprintf(fmt, *args)` and `fprintf(stream, fmt, *args)`.
  They understand `%d %l %x %p %s %c %%`, treat integers as 32-bit C
  ints, and echo unknown conversions with their percent sign.
- **`xv6kit.ulib`**: `atoi`, `strcmp` (unsigned byte difference) and
  `gets(stream, max)`.
- **`xv6kit.umalloc`**: `Heap(capacity=None, start=0x1000)` is a first-fit,
  address-ordered free-list allocator over a simulated program break.
  `malloc(nbytes)` returns an integer address, or `None` when `capacity`
  is exhausted. `free(address)` merges the block with its free neighbours.
- **`xv6kit.grep`**: a tiny matcher with `match`, `match_here` and
  `match_star` that supports `^ . * $`. `grep(pattern, stream, out)`
  filters lines, and `main(argv=None)` is the command-line entry point.
- **`xv6kit.tools`**: `cat`, `echo`, `wc`, `ln`, `rm`, `mkdir` and
  `salaam`. Each takes an argument list and streams and returns an exit
  status. `count_words(data)` returns a `WordCount(lines, words, chars)`.
- **`xv6kit.listing`**: `ls(path, out)`, `dir_table(path, out)` and
  `describe(path, out)` report on files and directories of the host file
  system. They are helped by `fmtname`, `type_name` and the `FileType` enum.
- **`xv6kit.sh`**: `tokenize(line)` and `parse_cmd(line)` turn a command
  line into a tree of `ExecCmd`, `RedirCmd` (with a `RedirMode` of `READ`,
  `WRITE` or `APPEND`), `PipeCmd`, `ListCmd` and `BackCmd`. Bad syntax,
  more than nine arguments, or leftover text raises `ShellSyntaxError`.
- **`xv6kit.grind`**: the Park–Miller minimal-standard generator.
  `do_rand(ctx)` is a single step, and `ParkMiller(seed=1)` is a stateful
  stream with `next()` and iteration.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

`xv6-grep` prints the newline-terminated lines of each file, or of
standard input, that match a pattern:

```
xv6-grep 'ab*c$' notes.txt
printf 'abc\nxyz\n' | xv6-grep '^a'
```

## Library examples

Matching with the tiny regular-expression engine:

```python
from xv6kit.grep import match

match("^ab*c", "abbbc")   # True
match("x.z$", "oxyz")     # True
match("^q", "abc")        # False
```

Formatting the way the user-level `printf` does:

```python
from xv6kit.printf import sprintf

sprintf("%s has %d files\n", "root", 12)   # 'root has 12 files\n'
sprintf("%x", 255)                         # 'FF'
```

Parsing a shell command line:

```python
from xv6kit.sh import parse_cmd, PipeCmd, RedirCmd

cmd = parse_cmd("cat README | grep the > out")
isinstance(cmd, PipeCmd)          # True
isinstance(cmd.right, RedirCmd)   # True
```

Building a user address space:

```python
from xv6kit.vm import PhysicalMemory, PageTable

memory = PhysicalMemory(64)
table = PageTable.create(memory)
size = table.grow(0, 8192)
table.copy_out(100, b"hello")
table.copy_in(100, 5)          # b"hello"
table.free(size)
```

Allocating from the heap:

```python
from xv6kit.umalloc import Heap

heap = Heap()
a = heap.malloc(100)
heap.free(a)
```

Counting words:

```python
from xv6kit.tools import count_words

count_words(b"one two\nthree\n")   # WordCount(lines=2, words=3, chars=14)
```

## What it does not do

xv6kit is a set of models and utilities, not a running system. It has no
kernel, scheduler, processes, system calls or disk file system, and it
cannot build a file-system image. The shell module only parses command
lines and never runs them. `ls`, `dir_table`, `describe` and the file
tools in `xv6kit.tools` act on the host's file system through `os`.
Only `xv6-grep` is installed as a command; the other tools are called as
Python functions.