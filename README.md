# fzfcore

The matching core of a line-oriented fuzzy finder, as a plain Python library
with no third-party dependencies.

| Module | What it provides |
| --- | --- |
| `fzfcore.algo` | `fuzzy_match_v1`, `fuzzy_match_v2`, `exact_match_naive`, `prefix_match`, `suffix_match`, `equal_match`, and the `MatchResult` they return |
| `fzfcore.scoring` | `CharClass`, `char_class_of`, `bonus_for`, `bonus_at`, `ascii_fuzzy_index`, `calculate_score` and `set_scheme` |
| `fzfcore.normalize` | `normalize_rune` and `normalize_runes`, which fold accented Latin letters to plain ones |
| `fzfcore.latin_lower` | `lower_base`, the table lookup behind normalization |
| `fzfcore.ansi` | `next_ansi_escape_sequence`, `parse_ansi_code`, `interpret_code`, `extract_color`, `AnsiState`, `AnsiOffset`, `Attr` |
| `fzfcore.chunklist` | `Chunk`, `ChunkList` and `count_items`: items stored in chunks of 100 with snapshots |
| `fzfcore.cache` | `ChunkCache`: per-chunk cache of results keyed by query |
| `fzfcore.item` | `Item`: an input line with its index, original text and colors |
| `fzfcore.history` | `History` and `HistoryError`: a query history kept in a text file |

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Matching

Every match function takes the same six arguments: whether matching is case
sensitive, whether to normalize accented letters, whether to scan forward,
the text, the pattern, and whether match positions are wanted. With
case-insensitive matching the pattern must already be lower case; with
normalization on it must already be normalized (see `normalize_runes`).

```python
from fzfcore.algo import fuzzy_match_v2, exact_match_naive

result = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True)
print(result.start, result.end, result.score, result.positions)

result = exact_match_naive(False, False, True, "/AutomatorDocument.icns", "rdoc", False)
print(result.start, result.end, result.score)   # 9 13 ...
```

A `MatchResult` with a `start` of `-1` means the pattern did not match;
`result.matched` says the same. Only `fuzzy_match_v1` and `fuzzy_match_v2`
fill in `positions`.

The scoring scheme is process-wide. Switch it before matching file paths or
shell history; any other name raises `ValueError`:

```python
from fzfcore.scoring import set_scheme

set_scheme("path")      # or "history", or "default"
```

## ANSI colors

```python
from fzfcore.ansi import extract_color

text, offsets, state = extract_color("hello \x1b[34;45;1mworld", None, None)
print(text)       # hello world
print(offsets)    # one AnsiOffset from 6 to 11, blue on magenta, bold
```

`offsets` is `None` when no colors are in effect. Pass the returned `state`
into the next call to carry colors over to the following line.
`AnsiState.to_string()` gives back the SGR sequence for a state.

## Chunks and caching

```python
from fzfcore.chunklist import ChunkList
from fzfcore.item import Item

items = ChunkList(lambda data: Item(data.decode()))
items.push(b"hello")
chunks, count = items.snapshot()
```

The builder returns the item to store, or `None` to skip the data. A snapshot
is not changed by later pushes. `ChunkCache` only keeps results for full
chunks, non-empty keys and lists of at most 20 results.

## History

```python
from fzfcore.history import History

history = History("queries.txt", 1000)
history.append("foo")
print(history.previous())
```

`append` ignores empty lines, keeps at most `max_size` entries and rewrites
the file. `override` changes the entry under the cursor in memory only. A
file that cannot be read or created raises `HistoryError`.

## What this package does not do

It is a library only. It has no command, no interactive screen, does not read
input from programs or standard input, and does not parse extended search
syntax or merge and sort results across chunks; those are left to the
application built on top of it.