# muonrate

Tools for event data from a detector built from three modules (m101,
m102, m103). Each module writes one text file per day, named
`<prefix>mate-m101.txt`, `<prefix>mate-m102.txt` and
`<prefix>mate-m103.txt`, where the prefix holds the date (`YYYYMMDD`,
optionally with `_` or `-` separators). One such set of files is a
*triad*. Each line holds a timestamp, three hex bytes of bar hits, a
second timestamp and an event number, separated by commas.

## What it does

- **Validate** (`muonrate.validator`): for every triad in a data
  directory, check that all three files exist and are readable, have the
  same number of lines and six columns per line, that the hit fields are
  one- or two-digit hex bytes, and that event numbers are consecutive.
  `validate_directory` writes a plain-text report (`[OK]` / `[BAD]` per
  prefix with its issues) and can move the files of bad triads into a
  separate directory (`move_bad_files`).
- **Convert** (`muonrate.processor`): `process_date(prefix)` decodes the
  hit bytes of each line into lists of bar positions for planes A1/B1,
  A2/B2 and A3/B3 and writes two files next to the raw data:
  `<prefix>combined_output.txt` (one comma-separated record per event)
  and `<prefix>output.jsonl` (the event table). `process_all(cfg)` does
  this for every triad in the data directory in date order.
- **Load** (`muonrate.loader`): pick dates among the `*output.jsonl`
  tables of a directory and join them into one `EventTable`.
- **Filter** (`muonrate.filtering`, `muonrate.cuts`): select events with
  cut expressions and join cuts with AND or OR. The result is kept in
  memory or written to `filtered_<unix time>.jsonl`.
- **Histogram** (`muonrate.histograms`): bar occupancy in 1D for any of
  `A1,B1,A2,B2,A3,B3` (`hist1d.pdf` by default), or B versus A for each
  plane in 2D, limited to events with exactly one hit in every plane
  (`hist2d_planes.pdf` by default).
- **Fit the rate** (`muonrate.ratefit`): collect the time between
  consecutive events that have exactly one hit in every plane
  (timestamps are in 100 ns ticks), histogram it and fit
  `exp(a - λ·t)`. The result gives λ and the mean period 1/λ with their
  errors; the plot goes to `rate_fit.pdf`. With fewer than ten time
  differences a warning is printed and an all-zero result returned.

## Installation

```
pip install .
```

## Command

```
muonrate [DATA_DIR [BAD_DIR [REPORT_FILE]]]
```

Any setting not given on the command line is asked for; pressing ENTER
uses `.`. The bad-file directory is created if needed. An interactive
menu follows (its prompts are in Spanish):

```
  0) Salir                                  exit
  1) Procesar .txt  →  tabla                validate, select dates, convert
  2) Cargar / concatenar tablas             load, save, filter, histograms, rate fit
```

Dates are chosen by pressing ENTER for all of them, or with either:

- a list: `20240921,20240923`
- an inclusive range: `20240921-20240925`

Answers to yes/no questions take `s` / `S` for yes.

## Cut expressions

Cuts are parsed by `muonrate.cuts.parse_cut` and may use:

- columns `ts`, `ts2_m101`, `ts2_m102`, `ts2_m103`, `evt`, the hit lists
  `A1` … `B3` and their counts `nA1` … `nB3`;
- an index on a hit list, such as `A1[0]`; a hit list used without an
  index is tested element by element and the event passes if any
  element does;
- numbers, `+ - * /`, `== != < <= > >=`, `!`, `&&`, `||`, parentheses;
- the function `No56(B2)`, true when neither bar 5 nor bar 6 was hit.

Invalid expressions raise `CutError`.

## Library use

```python
from muonrate.processor import process_date
from muonrate.events import EventTable
from muonrate.cuts import parse_cut
from muonrate.ratefit import run_rate_fit

txt_path, table_path = process_date("data/20240921_")
table = EventTable.load(table_path)
single = table.filter(parse_cut("nA1==1 && nB1==1"))
result = run_rate_fit(single, 2.0, 20, "rate_fit.pdf")
print(result.rate, result.err_rate, result.period)
```

`EventTable` also offers `save`, `concat` and `count`; each `Event`
converts to and from a column mapping with `to_dict` / `from_dict`.

## Limitations

Event tables are stored only as JSON-lines files (`*.jsonl`); no other
table or binary storage format is read or written. There is no
graphical viewer: histograms and fits are written to PDF files.

## Running the tests

```
pip install .[test]
pytest
```