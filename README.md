# hstratum

Tools for hereditary stratigraphy: comparing and encoding hereditary
stratigraphic columns to reason about the phylogenetic relationships between
digital organisms.

The package has no dependencies outside the Python standard library and
supports Python 3.10 and later.

## Modules

- `hstratum.column` – `HereditaryStratigraphicColumn` (a column of retained
  `Stratum` values in ascending rank order, built with
  `HereditaryStratigraphicColumn.from_parts`), the abstract
  `StratumRetentionPolicy` interface, and the helpers `differentia_mask` and
  `differentiae_match`.
- `hstratum.serialization` – binary packets (`col_to_packet`,
  `col_from_packet`), sentry-bit integer encoding (`col_to_int`,
  `col_from_int`) and the bit packers `pack_differentiae` and
  `unpack_differentiae`. Malformed input raises `DeserializationError`; a
  differentia bit width outside 1 to 64 raises `InvalidBitWidthError`. Both
  are subclasses of `ValueError`.
- `hstratum.mrca` – inclusive bounds on the rank of the most recent common
  ancestor of two columns (`calc_rank_of_mrca_bounds_between`,
  `calc_ranks_since_mrca_bounds_between`, `does_have_any_common_ancestor`) or
  of a population (`calc_rank_of_mrca_bounds_among`,
  `calc_rank_of_mrca_uncertainty_among`,
  `does_share_any_common_ancestor_among`).
- `hstratum.juxtaposition` – collision probabilities
  (`calc_probability_differentia_collision`,
  `calc_min_implausible_spurious_collisions`), matching common ranks
  (`iter_ranks_of_retained_commonality_between`,
  `get_nth_common_rank_between`), confidence-adjusted last commonality and
  first disparity, and `does_definitively_share_no_common_ancestor`.
- `hstratum.priors` – `ArbitraryPrior`, `UniformPrior` and `ExponentialPrior`,
  each giving an interval probability proxy and a conditioned mean rank.
- `hstratum.trie` – `Trie` (with a `(rank, differentia)` search table) and
  `NaiveTrie` (depth-first search), with `add_node`, `find_descendant` and
  `collapse_unifurcations`.
- `hstratum.postprocessors` – passes that set `origin_time` on `Trie` nodes:
  `AssignOriginTimeNodeRankPostprocessor`,
  `AssignOriginTimeNaivePostprocessor`,
  `AssignOriginTimeExpectedValuePostprocessor` and `CompoundPostprocessor`.

## Example

A retention policy only has to yield the ranks it keeps and name itself:

```python
from hstratum.column import HereditaryStratigraphicColumn, Stratum, StratumRetentionPolicy
from hstratum.mrca import calc_rank_of_mrca_bounds_between
from hstratum.serialization import col_from_packet, col_to_int, col_to_packet


class KeepAll(StratumRetentionPolicy):
    def iter_retained_ranks(self, num_strata_deposited):
        return iter(range(num_strata_deposited))

    def algo_identifier(self):
        return "keep_all"


def make(values):
    strata = [Stratum(rank, value) for rank, value in enumerate(values)]
    return HereditaryStratigraphicColumn.from_parts(KeepAll(), 64, strata, len(strata))


a = make([100, 200, 300, 400, 500])
b = make([100, 200, 300, 999, 888])

print(calc_rank_of_mrca_bounds_between(a, b))  # (2, 2)

packet = col_to_packet(a)
restored = col_from_packet(packet, KeepAll(), 64)
assert list(restored.iter_retained_strata()) == list(a.iter_retained_strata())

encoded = col_to_int(a)  # packet bytes below a sentry bit at 8 * len(packet)
```

Packets begin with a big-endian header holding the number of deposited
strata (4 bytes by default, 1 to 8 allowed), followed by the retained
differentiae packed most-significant-bit first at the column's bit width and
zero-padded to a whole byte. On decoding, the retained ranks are recovered
from the policy.

## What the package does not do

- It ships no concrete retention policies; supply your own
  `StratumRetentionPolicy` subclass.
- Columns are built from given strata only: there is no depositing of new
  strata or generation of random differentiae.
- There is no JSON or dictionary form of columns or populations; the only
  encodings are packets and integers.
- The tries and postprocessors are building blocks: nothing here builds a
  phylogenetic tree from a population of columns or exports one.
- There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```