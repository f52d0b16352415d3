"""Tests for peg proposals and the per-genome proposal list."""

from kmer_projector.locations.location import Location
from kmer_projector.locations.proposals import PegProposal, PegProposalList

ORF = Location("c1", "+", 1249, 1428)
EVIDENCE_LOC = Location("c1", "+", 1261, 1320)


class TestPegProposal:
    def test_create_extends_and_scores(self, orf_genome):
        proposal = PegProposal.create(orf_genome, EVIDENCE_LOC, "Some protein", 90)
        assert proposal.loc == ORF
        assert proposal.strength == 0.5
        assert proposal.key == ("c1", 1428, "+")

    def test_better_than(self):
        long = PegProposal(Location("c1", "+", 1, 300), "a", 0.5)
        short = PegProposal(Location("c1", "+", 100, 300), "b", 0.5)
        strong = PegProposal(Location("c1", "+", 100, 300), "c", 0.6)
        assert long.better_than(short)
        assert not short.better_than(long)
        assert strong.better_than(long)
        assert not long.better_than(strong)
        assert not long.better_than(long)

    def test_identity_is_orf(self):
        a = PegProposal(Location("c1", "+", 1, 300), "a", 0.5)
        b = PegProposal(Location("c1", "+", 100, 300), "b", 0.9)
        c = PegProposal(Location("c1", "-", 1, 300), "c", 0.5)
        assert a == b
        assert a != c
        assert len({a, b, c}) == 2


class TestPegProposalList:
    def test_weak_then_accepted(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.50)
        assert proposals.propose(EVIDENCE_LOC, "Weak protein", 69) is None
        assert proposals.weak_count == 1
        assert len(proposals) == 0
        accepted = proposals.propose(EVIDENCE_LOC, "Strong protein", 138)
        assert accepted is not None
        assert accepted.loc == ORF
        assert proposals.made_count == 2
        assert proposals.proposal_count == 1

    def test_weak_then_accepted_from_orf_start(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.50)
        evidence_loc = Location("c1", "+", 1249, 1302)
        assert proposals.propose(evidence_loc, "Weak protein", 69) is None
        assert proposals.weak_count == 1
        accepted = proposals.propose(evidence_loc, "Strong protein", 138)
        assert accepted.loc == ORF
        assert accepted.strength == 138 / 180
        assert len(proposals) == 1

    def test_exact_tie_keeps_first(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.20)
        proposals.propose(EVIDENCE_LOC, "First function", 90)
        assert proposals.propose(Location("c1", "+", 1264, 1320), "Second function", 90) is None
        assert proposals.merge_count == 0
        assert len(proposals) == 1
        kept = next(iter(proposals))
        assert kept.function == "First function"
        assert kept.strength == 0.5

    def test_too_little_evidence(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.10, min_evidence=100)
        assert proposals.propose(EVIDENCE_LOC, "Thin protein", 69) is None
        assert proposals.small_count == 1
        assert proposals.weak_count == 0
        assert len(proposals) == 0

    def test_unextendable_is_rejected(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.10)
        assert proposals.propose(Location("c1", "+", 301, 360), "Nowhere", 60) is None
        assert proposals.rejected_count == 1
        assert proposals.counts.made == 1

    def test_stronger_proposal_merges(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.20)
        first = proposals.propose(EVIDENCE_LOC, "First function", 86)
        second = proposals.propose(Location("c1", "+", 1264, 1320), "Second function", 141)
        assert second is first
        assert proposals.merge_count == 1
        assert len(proposals) == 1
        kept = next(iter(proposals))
        assert kept.function == "Second function"
        assert kept.strength == 141 / 180

    def test_weaker_proposal_for_same_orf_is_dropped(self, orf_genome):
        proposals = PegProposalList(orf_genome, 0.20)
        proposals.propose(EVIDENCE_LOC, "Strong function", 141)
        assert proposals.propose(EVIDENCE_LOC, "Weaker function", 50) is None
        assert proposals.merge_count == 0
        assert next(iter(proposals)).function == "Strong function"

    def test_iterates_in_location_order(self, overlap_genome):
        proposals = PegProposalList(overlap_genome, 0.0)
        proposals.propose(Location("c1", "+", 1210, 1240), "Gamma", 30)
        proposals.propose(Location("c1", "+", 500, 559), "Beta", 90)
        proposals.propose(Location("c1", "+", 301, 360), "Alpha", 60)
        assert [p.function for p in proposals] == ["Alpha", "Beta", "Gamma"]
        assert [p.loc for p in proposals] == [
            Location("c1", "+", 301, 603),
            Location("c1", "+", 452, 754),
            Location("c1", "+", 1201, 1353),
        ]
        assert proposals.counts.kept == 3
