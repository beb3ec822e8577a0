# tests/test_segmenter.py
"""Tests for splitting the row stream into systems."""

from multistar.data.records import PairRecord
from multistar.hierarchy.segmenter import SystemSegmenter


def record(index, code, names=(), ads=''):
    return PairRecord(index=index, multiplicity=code, proper_names=list(names), ads=ads)


class TestSystemSegmenter:
    """System boundaries and the one-row lookahead."""

    def test_shared_name_continues_system(self):
        rows = [record(1, 'AB', ['Castor']), record(2, 'A', ['Castor']), record(3, 'B', ['Castor'])]
        segmented = list(SystemSegmenter().segment(rows))

        assert [row.is_new_system for row in segmented] == [True, False, False]
        assert {row.system_index for row in segmented} == {1}
        assert segmented[1].system_names == ['Castor']

    def test_disjoint_names_start_new_system(self):
        rows = [record(1, 'AB', ['Castor']), record(2, 'AB', ['Pollux'])]
        segmented = list(SystemSegmenter().segment(rows))
        assert [row.system_index for row in segmented] == [1, 2]

    def test_repeated_code_starts_new_system(self):
        """A second "AB" row is another system even when it shares a name."""
        rows = [record(1, 'AB', ['HR 1']), record(2, 'A', ['HR 1']), record(3, 'AB', ['HR 1'])]
        segmented = list(SystemSegmenter().segment(rows))
        assert [row.is_new_system for row in segmented] == [True, False, True]
        assert segmented[2].system_index == 3

    def test_cross_identifiers_ignore_component_letters(self):
        rows = [record(1, 'AB', ads='6175 AB'), record(2, 'A', ads='6175 A')]
        segmented = list(SystemSegmenter().segment(rows))
        assert [row.is_new_system for row in segmented] == [True, False]

    def test_lookahead(self):
        rows = [record(1, 'ABC', ['X']), record(2, 'AB', ['X'])]
        segmented = list(SystemSegmenter().segment(rows))
        assert segmented[0].next_record is rows[1]
        assert segmented[1].next_record is None

    def test_counts_systems(self):
        segmenter = SystemSegmenter()
        list(segmenter.segment([record(1, 'AB', ['X']), record(2, 'AB', ['Y'])]))
        assert segmenter.systems_opened == 2

    def test_empty_input(self):
        assert list(SystemSegmenter().segment([])) == []

    def test_is_new_system_does_not_change_state(self):
        segmenter = SystemSegmenter()
        segmenter.advance(record(1, 'AB', ['X']))
        assert segmenter.is_new_system(record(2, 'AB', ['Y']))
        assert segmenter.current_names == ['X']
