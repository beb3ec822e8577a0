# tests/test_designations.py
"""Tests for component designations and name resolution."""

import re

import pytest

from multistar.data.records import PairRecord
from multistar.hierarchy.designations import (
    DesignationLedger,
    DesignationResolver,
    canonical_code,
    designation_rank,
    get_sibling,
    is_hyphenated,
    split_designation,
    strip_components,
    tycho_catalog_number,
)


class TestSplitDesignation:
    """Splitting a pair designation into its two components."""

    @pytest.mark.parametrize("designation,expected", [
        ("A", ("Aa", "Ab")),
        ("B", ("Ba", "Bb")),
        ("AB", ("A", "B")),
        ("BC", ("B", "C")),
        ("Aa", ("Aa1", "Aa2")),
        ("Ab", ("Ab1", "Ab2")),
        ("AB-C", ("AB", "C")),
        ("A-BC", ("A", "BC")),
        ("AB-CD", ("AB", "CD")),
        ("ACB", ("AC", "B")),
        ("ACD", ("A", "CD")),
    ])
    def test_known_designations(self, designation, expected):
        assert split_designation(designation, designation) == expected

    def test_hyphen_from_code(self):
        """Without a hyphen of its own, the row's code decides the split."""
        assert split_designation("ABCD", "AB-CD") == ("AB", "CD")

    def test_three_letters_use_next_row(self):
        assert split_designation("ABC", "ABC", next_code="AB") == ("AB", "C")
        assert split_designation("ABC", "ABC", next_code="BC") == ("A", "BC")

    def test_ambiguous_three_letters(self, caplog):
        assert split_designation("ABC", "ABC", next_code="D") == ("AB", "C")
        assert "Ambiguous designation" in caplog.text

    def test_unknown(self):
        assert split_designation("", "") == ("", "")
        assert split_designation("ab", "ab") == ("", "")


class TestCodeHelpers:

    def test_canonical_code(self):
        assert canonical_code("ABC", "AB") == "AB-C"
        assert canonical_code("ABC", "BC") == "A-BC"
        assert canonical_code("AB", "A") == "AB"
        assert canonical_code("ACD", None) == "ACD"

    def test_designation_rank(self):
        assert designation_rank("") == 0
        assert designation_rank("AB") == 1
        assert designation_rank("A") < designation_rank("Aa") < designation_rank("Ab")
        assert designation_rank("Ab") < designation_rank("B")

    def test_three_letter_roots_rank_before_their_halves(self):
        assert designation_rank("ACB") < designation_rank("AC") < designation_rank("B")
        assert designation_rank("ACD") < designation_rank("A") < designation_rank("CD")

    def test_unknown_rank_is_first(self, caplog):
        assert designation_rank("XYZ") < designation_rank("")
        assert "Unknown component designation" in caplog.text

    def test_is_hyphenated(self):
        assert is_hyphenated("AB-C")
        assert not is_hyphenated("AB")
        assert not is_hyphenated("-")

    def test_strip_components(self):
        assert strip_components(["ADS 1234 AB", "CCDM J01234+5678C", "Sirius", "ADS 99"]) == \
            ["ADS 1234", "CCDM J01234+5678", "Sirius", "ADS 99"]

    def test_get_sibling(self):
        assert get_sibling("AB-C", "AB") == "C"
        assert get_sibling("AB", "A") == "B"
        assert get_sibling("AB", "C") == "AB"
        assert get_sibling(None, "A") is None
        assert get_sibling("AB", "") is None

    def test_tycho_catalog_number(self):
        match = re.search(r'TYC (\d+)-(\d+)-(\d+)', "TYC 1234-567-1")
        assert tycho_catalog_number(match) == "1005671234"


class TestDesignationLedger:

    def test_record_and_lookup(self):
        ledger = DesignationLedger()
        ledger.record("Mizar", "A")
        assert "Mizar" in ledger
        assert len(ledger) == 1
        assert ledger.deferred_code("Mizar") == "A"
        assert ledger.deferred_code("Alcor") is None

    def test_empty_code_counts_as_absent(self):
        ledger = DesignationLedger()
        ledger.record("Foo", "")
        assert ledger.deferred_code("Foo") is None


class TestDesignationResolver:
    """Assignment of names to the barycenter and components of a row."""

    def test_root_pair(self):
        record = PairRecord(index=1, hip='36850', proper_names=['Castor'], bayer='alf Gem',
                            ads='6175 AB', multiplicity='AB',
                            names_primary=['HD 60179'], names_secondary=['HD 60178'])
        resolved = DesignationResolver().resolve(record, record.candidate_names, True)

        assert resolved.barycenter == ['Castor', 'alf Gem', 'ADS 6175 AB']
        assert resolved.primary == ['Castor A', 'alf Gem A', 'ADS 6175 A', 'HD 60179']
        assert resolved.secondary == ['Castor B', 'alf Gem B', 'ADS 6175 B', 'HD 60178']
        assert (resolved.primary_code, resolved.secondary_code) == ('A', 'B')
        assert resolved.hip_barycenter == '36850'
        assert resolved.first_barycenter_name == 'Castor'

    def test_sub_pair_gets_suffixed_names(self):
        root = PairRecord(index=1, proper_names=['Castor'], ads='6175 AB', multiplicity='AB')
        row = PairRecord(index=2, proper_names=['Castor'], ads='6175 A', multiplicity='A')
        resolved = DesignationResolver().resolve(row, root.candidate_names, False)

        assert resolved.barycenter == ['Castor A', 'ADS 6175 A']
        assert resolved.primary == ['Castor Aa', 'ADS 6175 Aa']
        assert resolved.secondary == ['Castor Ab', 'ADS 6175 Ab']

    def test_ccdm_identifier(self):
        record = PairRecord(index=1, ccdm='07346+3153AB', multiplicity='AB')
        resolved = DesignationResolver().resolve(record, record.candidate_names, True)
        assert resolved.barycenter == ['CCDM J07346+3153AB']
        assert resolved.primary == ['CCDM J07346+3153A']
        assert resolved.secondary == ['CCDM J07346+3153B']

    def test_partial_name_is_deferred(self):
        """A name first seen on a sub-pair is remembered and reused one level down."""
        resolver = DesignationResolver()
        system_names = ['Zeta UMa']
        first = PairRecord(index=2, proper_names=['Mizar'], multiplicity='A')
        resolved = resolver.resolve(first, system_names, False)
        assert resolved.barycenter == ['Mizar']
        assert resolved.primary == ['Mizar A']
        assert resolver.ledger.deferred_code('Mizar') == 'A'

        second = PairRecord(index=3, proper_names=['Mizar'], multiplicity='Aa')
        resolved = resolver.resolve(second, system_names, False)
        assert resolved.barycenter == ['Mizar A']
        assert resolved.primary == ['Mizar Aa']
        assert resolved.secondary == ['Mizar Ab']

    def test_hipparcos_and_tycho_from_component_lists(self):
        record = PairRecord(index=1, hip='', multiplicity='AB', proper_names=['X'],
                            names_primary=['TYC 1234-567-1'], names_secondary=['HIP 4711'])
        resolved = DesignationResolver().resolve(record, ['X'], True)
        assert resolved.hip_primary == '1005671234'
        assert resolved.hip_secondary == '4711'
        assert 'HIP 4711' not in resolved.secondary

    def test_double_hipparcos_number(self):
        record = PairRecord(index=1, hip='12345/7', multiplicity='AB', proper_names=['X'])
        resolved = DesignationResolver().resolve(record, ['X'], True)
        assert resolved.hip_barycenter == ''
        assert resolved.hip_primary == '12345'
        assert resolved.hip_secondary == '12347'

    def test_hd_only_on_secondary_moves_hipparcos_to_primary(self):
        record = PairRecord(index=1, hip='100', multiplicity='AB', proper_names=['X'],
                            names_secondary=['HD 2'])
        resolved = DesignationResolver().resolve(record, ['X'], True)
        assert resolved.hip_barycenter == ''
        assert resolved.hip_primary == '100'

    def test_repeated_hipparcos_is_not_reassigned(self):
        record = PairRecord(index=2, hip='100', multiplicity='A', proper_names=['X'])
        resolved = DesignationResolver().resolve(record, ['X'], False, previous_hip='100')
        assert resolved.hip_barycenter == ''
