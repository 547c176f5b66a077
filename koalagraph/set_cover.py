"""Exact minimum set cover by branch and reduce."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterable

import networkx as nx

from koalagraph.graph import Algorithm


def _find_set_inclusion(sets: list[set[int]]) -> tuple[int, int] | None:
    """First pair (i, j), i != j, with a non-empty sets[i] contained in sets[j]."""
    for i, subset in enumerate(sets):
        if not subset:
            continue
        for j, superset in enumerate(sets):
            if i != j and subset <= superset:
                return i, j
    return None


def _exclude(index: int, members: Iterable[int], reversed_sets: list[set[int]]) -> None:
    for element in members:
        reversed_sets[element].discard(index)


def _include(index: int, members: Iterable[int], reversed_sets: list[set[int]]) -> None:
    for element in members:
        reversed_sets[element].add(index)


class BranchAndReduceSetCover(Algorithm):
    """Minimum set cover of a family of sets over elements ``0..k-1``.

    ``occurrences[e]`` lists the indices of the sets containing element ``e``;
    it is derived from the family when omitted.
    """

    def __init__(self, family, occurrences=None):
        super().__init__()
        self._family = [set(s) for s in family]
        if occurrences is None:
            size = max((max(s) for s in self._family if s), default=-1) + 1
            self._occurrences = [set() for _ in range(size)]
            for i, members in enumerate(self._family):
                _include(i, members, self._occurrences)
        else:
            self._occurrences = [set(o) for o in occurrences]
        self._cover: list[bool] = []

    def run(self) -> None:
        self._cover = self._recurse()
        super().run()

    def set_cover(self) -> list[bool]:
        """For every set of the family, whether it belongs to the cover."""
        self.assure_finished()
        return list(self._cover)

    def _recurse(self) -> list[bool]:
        family = self._family
        if all(not members for members in family):
            return [False] * len(family)
        solution = self._reduce()
        if solution is not None:
            return solution
        solution = self._reduce_matching()
        if solution is not None:
            return solution
        largest = max(range(len(family)), key=lambda i: len(family[i]))
        included = self._forced_set_cover(largest)
        excluded = self._discarded_set_cover(largest)
        return included if sum(included) < sum(excluded) else excluded

    def _reduce(self) -> list[bool] | None:
        forced = self._find_unique_occurrence_set()
        if forced is not None:
            return self._forced_set_cover(forced)
        inclusion = _find_set_inclusion(self._family)
        if inclusion is not None:
            return self._discarded_set_cover(inclusion[0])
        return None

    def _find_unique_occurrence_set(self) -> int | None:
        for occurrence in self._occurrences:
            if len(occurrence) == 1:
                return next(iter(occurrence))
        return None

    @abstractmethod
    def _reduce_matching(self) -> list[bool] | None:
        """Solve directly when the instance allows it, else return None."""

    def _forced_set_cover(self, index: int) -> list[bool]:
        removed = []
        for element in self._family[index]:
            removed.extend((occurrence, element) for occurrence in self._occurrences[element])
            self._occurrences[element].clear()
        for occurrence, element in removed:
            self._family[occurrence].discard(element)
        solution = self._recurse()
        for occurrence, element in removed:
            self._family[occurrence].add(element)
            self._occurrences[element].add(occurrence)
        solution[index] = True
        return solution

    def _discarded_set_cover(self, index: int) -> list[bool]:
        saved = self._family[index]
        _exclude(index, saved, self._occurrences)
        self._family[index] = set()
        solution = self._recurse()
        self._family[index] = saved
        _include(index, saved, self._occurrences)
        return solution


class GrandoniSetCover(BranchAndReduceSetCover):
    """Branch and reduce with the unique-element and subset rules only."""

    def _reduce_matching(self) -> list[bool] | None:
        return None


class FominGrandoniKratschSetCover(BranchAndReduceSetCover):
    """Solves instances with sets of size at most two via maximum matching."""

    def _reduce_matching(self) -> list[bool] | None:
        if any(len(members) > 2 for members in self._family):
            return None
        pairs = [sorted(members) for members in self._family]
        graph = nx.Graph()
        graph.add_edges_from(tuple(p) for p in pairs if len(p) == 2)
        mate: dict[int, int] = {}
        for a, b in nx.max_weight_matching(graph, maxcardinality=True):
            mate[a], mate[b] = b, a
        cover = [False] * len(self._family)
        dominated: set[int] = set()
        for i, pair in enumerate(pairs):
            if len(pair) == 2 and mate.get(pair[0]) == pair[1]:
                cover[i] = True
                dominated.update(pair)
        for element, occurrence in enumerate(self._occurrences):
            if element not in dominated and occurrence:
                cover[min(occurrence)] = True
        return cover


class RooijBodlaenderSetCover(FominGrandoniKratschSetCover):
    """Adds the subsumption, counting and size-two frequency-two rules."""

    def _reduce(self) -> list[bool] | None:
        solution = super()._reduce()
        if solution is not None:
            return solution
        family, occurrences = self._family, self._occurrences

        inclusion = _find_set_inclusion(occurrences)
        if inclusion is not None:
            superset_index = inclusion[1]
            saved = occurrences[superset_index]
            _exclude(superset_index, saved, family)
            occurrences[superset_index] = set()
            solution = self._recurse()
            occurrences[superset_index] = saved
            _include(superset_index, saved, family)
            return solution

        counting = self._find_counting_rule_reduction_set()
        if counting is not None:
            return self._forced_set_cover(counting)

        chosen = self._find_cardinality_frequency_set()
        if chosen is None:
            return None
        indices = [chosen] + [
            other
            for element in sorted(family[chosen])
            for other in sorted(occurrences[element])
            if other != chosen
        ]
        replacement = (family[indices[1]] | family[indices[2]]) - family[chosen]
        for index in indices:
            _exclude(index, family[index], occurrences)
        _include(indices[1], replacement, occurrences)
        saved = [family[index] for index in indices]
        for index, members in zip(indices, (set(), replacement, set())):
            family[index] = members
        solution = self._recurse()
        for index, members in zip(indices, saved):
            family[index] = members
        _exclude(indices[1], replacement, occurrences)
        for index in indices:
            _include(index, family[index], occurrences)
        if solution[indices[1]]:
            solution[indices[2]] = True
        else:
            solution[indices[0]] = True
        return solution

    def _find_counting_rule_reduction_set(self) -> int | None:
        family, occurrences = self._family, self._occurrences
        for i, candidate in enumerate(family):
            frequency_two = 0
            not_covered: set[int] = set()
            for element in candidate:
                if len(occurrences[element]) == 2:
                    frequency_two += 1
                    for other in occurrences[element]:
                        if other != i:
                            not_covered |= family[other] - candidate
            if len(not_covered) < frequency_two:
                return i
        return None

    def _find_cardinality_frequency_set(self) -> int | None:
        for i, candidate in enumerate(self._family):
            if len(candidate) == 2 and all(
                len(self._occurrences[element]) == 2 for element in candidate
            ):
                return i
        return None