import heapq
from typing import List, Tuple


class MinPriorityQueue: # min-heap of node ids keyed by frequency
    """
    Array-backed binary heap over tree node ids.

    Entries are (frequency, insertion_seq, node_id) so that equal frequencies
    leave the queue in the order they were pushed, never by symbol value
    """

    def __init__(self):
        self._heap: List[Tuple[int, int, int]] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._heap)

    def push(self, node_id: int, frequency: int) -> None:
        heapq.heappush(self._heap, (frequency, self._seq, node_id))
        self._seq += 1

    def pop(self) -> int:
        if not self._heap:
            raise IndexError("pop from empty priority queue")
        _, _, node_id = heapq.heappop(self._heap)
        return node_id
