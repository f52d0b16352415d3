"""
Genomic locations, framed location lists and peg proposals.
"""

from kmer_projector.locations.location import Frame, Location
from kmer_projector.locations.framed_lists import FramedLocationLists, LocationReport, SortedLocationList
from kmer_projector.locations.proposals import PegProposal, PegProposalList

__all__ = [
    "Frame",
    "Location",
    "FramedLocationLists",
    "LocationReport",
    "SortedLocationList",
    "PegProposal",
    "PegProposalList",
]
