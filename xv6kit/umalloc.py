"""A first-fit free-list heap allocator over a simulated program break."""

HEADER_SIZE = 16  # bytes per block header, also the allocation unit
MIN_CORE_UNITS = 4096  # smallest growth of the break, in units

_BASE = 0  # address of the zero-sized sentinel block


class Heap:
    """A circular, address-ordered free list that grows the break on demand.

    Addresses are plain integers. ``capacity`` bounds how many bytes the
    break may grow by; ``None`` means no bound.
    """

    def __init__(self, capacity=None, start=0x1000):
        if start <= _BASE or start % HEADER_SIZE:
            raise ValueError("heap start must be a positive multiple of the header size")
        self.capacity = capacity
        self.start = start
        self._brk = start
        self._next = {}
        self._size = {}
        self._allocated = set()
        self._freep = None

    def _sbrk(self, nbytes):
        if self.capacity is not None and self._brk + nbytes - self.start > self.capacity:
            return None
        old = self._brk
        self._brk += nbytes
        return old

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_CORE_UNITS)
        hp = self._sbrk(nunits * HEADER_SIZE)
        if hp is None:
            return None
        self._size[hp] = nunits
        self._allocated.add(hp)
        self.free(hp + HEADER_SIZE)
        return self._freep

    def malloc(self, nbytes):
        """Allocate ``nbytes`` and return the block's address, or None when out of memory."""
        if nbytes < 0:
            raise ValueError("size must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._next[_BASE] = _BASE
            self._size[_BASE] = 0
            self._freep = _BASE
        prevp = self._freep
        p = self._next[prevp]
        while True:
            if self._size[p] >= nunits:
                if self._size[p] == nunits:
                    self._next[prevp] = self._next[p]
                else:
                    self._size[p] -= nunits
                    p += self._size[p] * HEADER_SIZE
                    self._size[p] = nunits
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
                if p is None:
                    return None
            prevp, p = p, self._next[p]

    def free(self, address):
        """Return a block to the free list, merging it with free neighbours."""
        bp = address - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"{address:#x} is not an allocated block")
        self._allocated.discard(bp)
        nxt, size = self._next, self._size
        p = self._freep
        while not (p < bp < nxt[p]):
            if p >= nxt[p] and (bp > p or bp < nxt[p]):
                break
            p = nxt[p]
        q = nxt[p]
        if bp + size[bp] * HEADER_SIZE == q:
            size[bp] += size.pop(q)
            nxt[bp] = nxt.pop(q)
        else:
            nxt[bp] = q
        if p + size[p] * HEADER_SIZE == bp:
            size[p] += size.pop(bp)
            nxt[p] = nxt.pop(bp)
        else:
            nxt[p] = bp
        self._freep = p