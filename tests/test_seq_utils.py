"""Tests for sequence utilities."""

import pytest

from trtrimmer.utils.seq_utils import complement_base, fold_case, normalize, reverse_complement


class TestReverseComplement:
    """Tests for reverse_complement."""

    def test_basic(self):
        """Simple sequences."""
        assert reverse_complement("AACG") == "CGTT"
        assert reverse_complement("ACGT") == "ACGT"
        assert reverse_complement("") == ""

    def test_preserves_case(self):
        """Case is kept base by base."""
        assert reverse_complement("aCgT") == "AcGt"
        assert reverse_complement("acgN") == "Ncgt"

    def test_unknown_symbols(self):
        """Unknown symbols become N."""
        assert reverse_complement("AXG") == "CNT"

    def test_involution(self):
        """Applying it twice gives back a canonical sequence."""
        seq = "GATTACAggccNRY"
        assert reverse_complement(reverse_complement(seq)) == seq

    def test_complement_base(self):
        """Single bases, including IUPAC codes and RNA."""
        assert complement_base("A") == "T"
        assert complement_base("g") == "c"
        assert complement_base("R") == "Y"
        assert complement_base("U") == "A"
        assert complement_base("*") == "N"


class TestNormalize:
    """Tests for normalize."""

    def test_uppercase(self):
        assert normalize("acgtn") == "ACGTN"

    def test_rna(self):
        """U is read as T."""
        assert normalize("ACGU") == "ACGT"
        assert normalize("acgu") == "ACGT"

    def test_ambiguity_to_n(self):
        """IUPAC codes and stray symbols become N."""
        assert normalize("ARY*") == "ANNN"

    def test_gaps_kept(self):
        """Gap symbols all become '-', not N."""
        assert normalize("AC-G.T~") == "AC-G-T-"
        assert normalize("A-.c", complement=True) == "T--G"

    def test_complement(self):
        """Complement without reversing."""
        assert normalize("ACGTN", complement=True) == "TGCAN"
        assert normalize("aRy", complement=True) == "TNN"

    def test_length_preserved(self):
        seq = "acgtRYKM-.*xyzU"
        assert len(normalize(seq)) == len(seq)


class TestFoldCase:
    """Tests for fold_case."""

    def test_basic(self):
        assert fold_case("acGTn") == "ACGTN"

    def test_length_preserved(self):
        """Non-ASCII characters are left alone."""
        seq = "acgtß"
        assert len(fold_case(seq)) == len(seq)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
