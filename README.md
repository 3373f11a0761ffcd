# bigview

A terminal viewer for very large text files. The file is memory-mapped and
indexed by line once, so scrolling, jumping and searching stay fast even for
large files.

JSON and XML files are pretty-printed before viewing: the formatted copy is
written next to the original as `<name>_formatted.<ext>` and that copy is
opened instead. JSON is re-indented with two spaces and its object keys are
sorted; XML elements are re-indented with four spaces per level.

## Installation

```
pip install .
```

The viewer uses the standard library's `curses` module, so it needs a POSIX
terminal.

## Usage

```
bigview path/to/file.log
```

Files larger than 10 MB show a progress bar while they are indexed. Searches
in files with more than 100,000 lines run in the background with a progress
bar, and can be cancelled with Esc, which returns to the search input with the
term kept.

If standard input or output is not a terminal, `bigview` prints an error and
exits with status 1. A JSON or XML file that cannot be parsed is reported the
same way.

### Keys

| Key                   | Action                                  |
|-----------------------|-----------------------------------------|
| `q`, `Ctrl+C`         | quit                                    |
| `Up` / `Down`         | scroll one line                         |
| `PageUp` / `PageDown` | scroll one page                         |
| `Home`, `g`           | go to the start                         |
| `End`, `G`            | go to the end                           |
| `/`                   | enter a search term                     |
| `Enter`               | run the search                          |
| `n` / `N`             | next / previous match                   |
| `Esc`                 | leave search input, or clear the search |
| `Ctrl+V`              | paste the last copied text into the search input |

In the search input, `Left`, `Right`, `Home`, `End`, `Backspace` and `Delete`
edit the term.

### Mouse

- The wheel scrolls three lines at a time.
- Drag with the left button to select text.
- Right-click a selection for a menu with **Copy** and **Search**.

## Clipboard

**Copy** keeps the selected text inside the viewer and, when output goes to a
terminal, also sends it to the terminal's clipboard with an OSC 52 escape
sequence (this works only in terminals that support it). `Ctrl+V` pastes the
text the viewer itself last copied; it does not read the system clipboard.

## Using it from Python

```python
from bigview.file_reader import open_file
from bigview.formatter import format_if_needed

path = format_if_needed("data.json")
with open_file(path) as reader:
    print(reader.line_count())
    print(reader.get_lines(0, 5))
    print(reader.search("error"))
```

`open_file` and `FileReader.search` also take an optional progress callback,
called with a fraction between 0 and 1 and a message. `FileReader` can be built
directly from a `bytes` buffer, and `FileReader.search_context()` returns a
`SearchContext` that can search the same data from another thread.

The viewer's state lives in `bigview.viewer.Viewer`, events are applied by
`bigview.event_handler.handle_event`, and `bigview.render.draw` paints a viewer
onto any screen object offering `size()`, `clear()`, `put(y, x, text, style)`
and `refresh()`.

## Running the tests

```
pip install .[test]
pytest
```