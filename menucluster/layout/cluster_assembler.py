# menucluster/layout/cluster_assembler.py
"""
Cluster Assembler: fragments in, menu items out.

Pipeline (per call, no state kept between calls):
  1. Walk fragments in reading order, cutting a new cluster whenever the
     current one refuses the next fragment.
  2. Fold stranded price-only clusters into the entry before them.
  3. Drop blank clusters, export the rest as {title, price}.

Public API:
- ClusterAssembler(...).assemble(fragments) -> [MenuItem, ...]
- ClusterAssembler(...).assemble_pages(pages) -> [MenuItem, ...]
- get_menu_items(fragments) -> [MenuItem, ...]
- extract_menu_items(pages, include_raw=False) -> items | (items, raw)
"""

from __future__ import annotations

import logging
from itertools import chain
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from menucluster.fragment_types import MenuItem, RawFragment, TextFragment
from menucluster.layout.text_cluster import TextCluster

log = logging.getLogger(__name__)


class ClusterAssembler:
    def __init__(
        self,
        *,
        same_line_tolerance: Optional[float] = None,
        letter_gap_tolerance: Optional[float] = None,
    ):
        self.same_line_tolerance = same_line_tolerance
        self.letter_gap_tolerance = letter_gap_tolerance

    def _new_cluster(self) -> TextCluster:
        return TextCluster(
            same_line_tolerance=self.same_line_tolerance,
            letter_gap_tolerance=self.letter_gap_tolerance,
        )

    # ── Pass 1: partition ────────────────────────────

    def build_clusters(self, fragments: Iterable[RawFragment]) -> List[TextCluster]:
        clusters: List[TextCluster] = []
        cluster = self._new_cluster()

        for raw in fragments:
            if not isinstance(raw, Mapping):
                log.debug("Skipping non-mapping fragment: %r", raw)
                continue
            item = TextFragment.from_raw(raw)

            if cluster and not cluster.is_same_cluster(item):
                clusters.append(cluster)
                cluster = self._new_cluster()

            cluster.append(item)

        # last open cluster (never sealed inside the loop)
        if cluster:
            clusters.append(cluster)
        return clusters

    # ── Pass 2: reattach stranded prices ─────────────

    @staticmethod
    def merge_price_clusters(clusters: Sequence[TextCluster]) -> List[TextCluster]:
        merged: List[TextCluster] = []
        for cluster in clusters:
            if merged and cluster.contains_only_price():
                merged[-1].merge(cluster)
            else:
                merged.append(cluster)
        return merged

    # ── Full run ─────────────────────────────────────

    def assemble(self, fragments: Iterable[RawFragment]) -> List[MenuItem]:
        clusters = self.build_clusters(fragments)
        merged = self.merge_price_clusters(clusters)
        kept = [c for c in merged if not c.is_blank()]
        log.debug(
            "Assembled %d clusters -> %d after price merge -> %d non-blank",
            len(clusters), len(merged), len(kept),
        )
        return [c.export() for c in kept]

    def assemble_pages(self, pages: Iterable[Iterable[RawFragment]]) -> List[MenuItem]:
        """Pages are concatenated in order before clustering."""
        return self.assemble(chain.from_iterable(pages))


# ---------------------------------------------------------------------------
# Function API
# ---------------------------------------------------------------------------

def get_menu_items(fragments: Iterable[RawFragment]) -> List[MenuItem]:
    return ClusterAssembler().assemble(fragments)


def extract_menu_items(
    pages: Iterable[Iterable[RawFragment]],
    *,
    include_raw: bool = False,
    assembler: Optional[ClusterAssembler] = None,
) -> Union[List[MenuItem], Tuple[List[MenuItem], List[RawFragment]]]:
    """
    Turn per-page fragment lists into menu items.

    With include_raw=True also return the flat raw fragment list (the echo
    used when capturing new fixtures or debugging a bad parse).
    """
    raw_fragments = list(chain.from_iterable(pages))
    items = (assembler or ClusterAssembler()).assemble(raw_fragments)
    log.info("Extracted %d menu items from %d fragments", len(items), len(raw_fragments))
    if include_raw:
        return items, raw_fragments
    return items
