"""Work allocation of PXF fragments across segments."""

from pyspark.sql.datasource import InputPartition

from .errors import PxfInternalError, PxfSeedUnavailableError


class SegmentPartition(InputPartition):
    """
    Represents one segment of a parallel PXF read.

    Every partition of a query carries the same transaction id, which all
    segments use as the shared seed when deciding fragment ownership.
    """

    def __init__(self, segment, total_segments, transaction_id=None):
        """
        Initialize a segment partition.

        Args:
            segment: Segment number (0 to total_segments - 1)
            total_segments: Total number of segments in the query
            transaction_id: Query-wide seed shared by all segments
        """
        self.segment = segment
        self.total_segments = total_segments
        self.transaction_id = transaction_id

    def context(self):
        """Return the query execution context for this segment."""
        return QueryContext(self.segment, self.total_segments, self.transaction_id)

    def __eq__(self, other):
        """Check equality based on partition content."""
        if not isinstance(other, SegmentPartition):
            return False
        return (
            self.segment == other.segment
            and self.total_segments == other.total_segments
            and self.transaction_id == other.transaction_id
        )

    def __hash__(self):
        """Return hash for use in sets/dicts."""
        return hash((self.segment, self.total_segments, self.transaction_id))

    def __repr__(self):
        """Return string representation."""
        return (
            f"SegmentPartition(segment={self.segment}, total_segments={self.total_segments}, "
            f"transaction_id={self.transaction_id})"
        )


class QueryContext:
    """Segment identity and shared seed supplied once per query."""

    def __init__(self, segment_index, segment_count, transaction_id=None):
        self.segment_index = segment_index
        self.segment_count = segment_count
        self.transaction_id = transaction_id

    def require_transaction_id(self):
        """
        Return the distributed transaction id.

        Raises:
            PxfSeedUnavailableError: If no valid transaction id is set
        """
        if self.transaction_id is None or self.transaction_id < 0:
            raise PxfSeedUnavailableError(
                "internal error in filter_fragments_for_segment: "
                "cannot get distributed transaction identifier"
            )
        return self.transaction_id

    def __repr__(self):
        return (
            f"QueryContext(segment_index={self.segment_index}, "
            f"segment_count={self.segment_count}, transaction_id={self.transaction_id})"
        )


def segment_for_position(position, segment_count, seed):
    """
    Return the segment that owns the element at ``position``.

    Ownership is ``(position + seed mod N) mod N``: round robin, starting at
    an offset taken from the query-wide seed so that short lists do not
    always land on segment 0.
    """
    shift = seed % segment_count
    return (position + shift) % segment_count


def filter_fragments_for_segment(fragments, context):
    """
    Keep only the fragments owned by the current segment.

    Dropped fragments are released. Relative order of the kept fragments is
    preserved.

    Args:
        fragments: List of DataFragment, identically ordered on every segment
        context: QueryContext of the current segment

    Returns:
        List of DataFragment assigned to ``context.segment_index``

    Raises:
        PxfInternalError: If the list is None or the segment identity is invalid
        PxfSeedUnavailableError: If the context has no transaction id
    """
    if fragments is None:
        raise PxfInternalError(
            "internal error in filter_fragments_for_segment: parameter list is null"
        )

    segment_count = context.segment_count
    if segment_count is None or segment_count < 1:
        raise PxfInternalError(f"invalid segment count {segment_count}")
    if context.segment_index is None or not 0 <= context.segment_index < segment_count:
        raise PxfInternalError(
            f"invalid segment index {context.segment_index} for {segment_count} segments"
        )

    seed = context.require_transaction_id()

    kept = []
    for position, fragment in enumerate(fragments):
        if segment_for_position(position, segment_count, seed) == context.segment_index:
            kept.append(fragment)
        else:
            fragment.release()
    return kept
