# randtest

A library for producing pseudorandom bytes with ChaCha20 and for judging how
random a sequence of bits is.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Generating random bytes

`randtest.chacha20.ChaCha20` takes a 32-byte key, a nonce (12 bytes or three
32-bit words) and a 32-bit block counter.

```python
from randtest.chacha20 import ChaCha20, random_key

cipher = ChaCha20(random_key(32), (0x1, 0x20000000, 0x3), 0)
with open("output.bin", "wb") as out:
    cipher.write_keystream(out, 10_000_000)
```

- `ChaCha20.keystream(length)` returns the next `length` keystream bytes.
- `ChaCha20.encrypt(data)` XORs `data` with the keystream; the same call decrypts
  with a fresh cipher built from the same key, nonce and counter.
- Each call advances the block counter.
- `chacha_block(state)` and `quarter_round(a, b, c, d)` expose the block function.
- `random_key(size)` reads bytes from the operating system's random source.

## Statistical tests

Every test takes bits in any form `randtest.common.as_bits` accepts: a string
of `0`/`1` characters, bytes (unpacked most significant bit first), a numpy
array or an iterable of 0/1 values. Each returns a `TestResult` with a
`p_value`, a `statistics` mapping and a `passed()` method. A test fails when
its p-value is below the significance level `ALPHA = 0.01`. Arguments a test
cannot work with raise `ValueError`.

| Function | Module | Returns |
| --- | --- | --- |
| `frequency(bits)` | `randtest.frequency` | one result |
| `block_frequency(bits, block_length)` | `randtest.frequency` | one result |
| `runs(bits)` | `randtest.runs` | one result |
| `longest_run_of_ones(bits)` | `randtest.runs` | one result (needs 128 bits or more) |
| `cumulative_sums(bits)` | `randtest.runs` | forward and reverse results |
| `rank(bits)` | `randtest.rank` | one result on 32x32 matrices |
| `discrete_fourier_transform(bits)` | `randtest.spectral` | one result |
| `non_overlapping_template_matchings(bits, m, templates=None)` | `randtest.templates` | one result per template |
| `overlapping_template_matchings(bits, m)` | `randtest.overlapping` | one result |
| `universal(bits)` | `randtest.universal` | one result (needs 387840 bits or more) |
| `approximate_entropy(bits, m)` | `randtest.entropy` | one result |
| `serial(bits, m)` | `randtest.entropy` | two results |
| `random_excursions(bits)` | `randtest.excursions` | one result per state -4..-1, 1..4 |
| `random_excursions_variant(bits)` | `randtest.excursions` | one result per state -9..-1, 1..9 |
| `linear_complexity(bits, block_length)` | `randtest.complexity` | one result |

```python
from randtest.common import as_bits
from randtest.frequency import frequency, block_frequency
from randtest.runs import runs, cumulative_sums

with open("output.bin", "rb") as source:
    bits = as_bits(source.read(125_000))

print(frequency(bits).p_value, frequency(bits).passed())
print(block_frequency(bits, 128).p_value)
print(runs(bits).p_value)
forward, reverse = cumulative_sums(bits)
```

When no templates are given, the non-overlapping template test generates the
aperiodic templates of length `m` with `aperiodic_templates(m)` and uses at
most 148 of them, spread evenly.

Helpers used by the tests are public too: `randtest.matrix.build_matrix` and
`compute_rank` (rank over GF(2)), `randtest.complexity.berlekamp_massey`,
`randtest.entropy.psi2`, `randtest.overlapping.overlap_probability`, and the
special functions in `randtest.cephes` (`igamc`, `igam`, `lgam`, `erf`, `erfc`,
`normal`, `polevl`, `p1evl`).

## Summarising many sequences

`randtest.report` turns the p-values of one test over many sequences into a
line of the final analysis table:

```python
from randtest.report import compute_metrics, minimum_pass_rate, summary_footer

metrics = compute_metrics(p_values)            # random_excursion=True skips zeros
print(metrics.format("Frequency"))
print(minimum_pass_rate(metrics.sample_size))
print(summary_footer(metrics.sample_size, 0, True, False))
```

`Metrics` holds the ten-bin histogram, the uniformity p-value (None when there
are fewer than ten samples), the pass count and its acceptable range.
`partition_results(values, num_files)` splits interleaved results, such as the
two cumulative sums p-values per sequence, into one list per sub-test.

## What this package does not do

- It has no command-line program; all of it is used from Python.
- It has no reference generators (linear congruential, Blum-Blum-Shub and the
  like) to feed the tests; bring your own bits, for instance from `ChaCha20`.
- It has no runner that applies a chosen set of tests to a stream or to a
  series of streams, and no readers for bit files; read the file yourself and
  pass the data through `as_bits`.
- It writes no result directories or report files; the report functions return
  strings and values.

## Running the package's tests

```
pytest
```