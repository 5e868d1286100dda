"""Sv39 page tables built on a simulated physical memory."""

from .riscv import (
    MAXVA,
    PGSIZE,
    PTE_R,
    PTE_SIZE,
    PTE_U,
    PTE_V,
    PTE_W,
    PTE_X,
    pa2pte,
    pg_round_down,
    pg_round_up,
    pte2pa,
    pte_flags,
    px,
)

DEFAULT_BASE = 0x80000000

_ALLOC_JUNK = 5
_FREE_JUNK = 1


class KernelPanic(RuntimeError):
    """An unrecoverable kernel invariant violation."""


class OutOfMemoryError(MemoryError):
    """No physical page was available."""


class BadAddressError(ValueError):
    """A user virtual address is not mapped for user access."""


class PhysicalMemory:
    """Page-granular physical RAM with a free-page allocator."""

    def __init__(self, npages, base=DEFAULT_BASE):
        if base % PGSIZE:
            raise ValueError("physical base must be page-aligned")
        self.base = base
        self.end = base + npages * PGSIZE
        self._ram = bytearray(npages * PGSIZE)
        self._free = []
        for pa in range(base, self.end, PGSIZE):
            self.kfree(pa)

    def _offset(self, pa, n):
        if pa < self.base or pa + n > self.end:
            raise KernelPanic(f"physical access out of range: {pa:#x}+{n}")
        return pa - self.base

    def kalloc(self):
        """Allocate one page and return its physical address; contents are junk."""
        if not self._free:
            raise OutOfMemoryError("out of physical pages")
        pa = self._free.pop()
        off = pa - self.base
        self._ram[off:off + PGSIZE] = bytes([_ALLOC_JUNK]) * PGSIZE
        return pa

    def kfree(self, pa):
        """Return a page to the free list, filling it with junk."""
        if pa % PGSIZE or pa < self.base or pa >= self.end:
            raise KernelPanic("kfree")
        off = pa - self.base
        self._ram[off:off + PGSIZE] = bytes([_FREE_JUNK]) * PGSIZE
        self._free.append(pa)

    def read(self, pa, n):
        """Read ``n`` bytes at physical address ``pa``."""
        off = self._offset(pa, n)
        return bytes(self._ram[off:off + n])

    def write(self, pa, data):
        """Write ``data`` at physical address ``pa``."""
        off = self._offset(pa, len(data))
        self._ram[off:off + len(data)] = data

    def load_pte(self, addr):
        """Read a 64-bit little-endian page-table entry."""
        return int.from_bytes(self.read(addr, PTE_SIZE), "little")

    def store_pte(self, addr, value):
        """Write a 64-bit little-endian page-table entry."""
        self.write(addr, value.to_bytes(PTE_SIZE, "little"))

    def free_count(self):
        """Number of pages currently free."""
        return len(self._free)


class PageTable:
    """A three-level Sv39 page table rooted in physical memory."""

    def __init__(self, memory, root):
        self.memory = memory
        self.root = root

    @classmethod
    def create(cls, memory):
        """Allocate an empty page table."""
        root = memory.kalloc()
        memory.write(root, bytes(PGSIZE))
        return cls(memory, root)

    def walk(self, va, alloc):
        """Return the physical address of the level-0 PTE for ``va``, or None.

        With ``alloc`` true, missing page-table pages are created; None is
        returned if that runs out of memory.
        """
        if va >= MAXVA:
            raise KernelPanic("walk")
        table = self.root
        for level in (2, 1):
            slot = table + PTE_SIZE * px(level, va)
            pte = self.memory.load_pte(slot)
            if pte & PTE_V:
                table = pte2pa(pte)
                continue
            if not alloc:
                return None
            try:
                table = self.memory.kalloc()
            except OutOfMemoryError:
                return None
            self.memory.write(table, bytes(PGSIZE))
            self.memory.store_pte(slot, pa2pte(table) | PTE_V)
        return table + PTE_SIZE * px(0, va)

    def walkaddr(self, va):
        """Translate a user virtual address to a physical page address, or None."""
        if va >= MAXVA:
            return None
        slot = self.walk(va, False)
        if slot is None:
            return None
        pte = self.memory.load_pte(slot)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return pte2pa(pte)

    def map_pages(self, va, size, pa, perm):
        """Map ``[va, va+size)`` to physical memory starting at ``pa``."""
        if size == 0:
            raise KernelPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            slot = self.walk(a, True)
            if slot is None:
                raise OutOfMemoryError("no memory for page-table page")
            if self.memory.load_pte(slot) & PTE_V:
                raise KernelPanic("mappages: remap")
            self.memory.store_pte(slot, pa2pte(pa) | perm | PTE_V)
            if a == last:
                break
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va, npages, do_free):
        """Remove ``npages`` existing leaf mappings from page-aligned ``va``."""
        if va % PGSIZE:
            raise KernelPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            slot = self.walk(a, False)
            if slot is None:
                raise KernelPanic("uvmunmap: walk")
            pte = self.memory.load_pte(slot)
            if not pte & PTE_V:
                raise KernelPanic("uvmunmap: not mapped")
            if pte_flags(pte) == PTE_V:
                raise KernelPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.kfree(pte2pa(pte))
            self.memory.store_pte(slot, 0)

    def init_user(self, src):
        """Load the first process's code at virtual address 0; must fit in a page."""
        if len(src) >= PGSIZE:
            raise KernelPanic("inituvm: more than a page")
        mem = self.memory.kalloc()
        self.memory.write(mem, bytes(PGSIZE))
        self.map_pages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, src)

    def grow(self, oldsz, newsz):
        """Allocate zeroed user pages to grow from ``oldsz`` to ``newsz``; return the new size."""
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.kalloc()
            except OutOfMemoryError:
                self.shrink(a, oldsz)
                raise
            self.memory.write(mem, bytes(PGSIZE))
            try:
                self.map_pages(a, PGSIZE, mem, PTE_W | PTE_X | PTE_R | PTE_U)
            except OutOfMemoryError:
                self.memory.kfree(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz, newsz):
        """Free user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, True)
        return newsz

    def _free_table(self, table):
        for slot in range(table, table + PGSIZE, PTE_SIZE):
            pte = self.memory.load_pte(slot)
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._free_table(pte2pa(pte))
                self.memory.store_pte(slot, 0)
            elif pte & PTE_V:
                raise KernelPanic("freewalk: leaf")
        self.memory.kfree(table)

    def free_walk(self):
        """Free all page-table pages; every leaf mapping must already be gone."""
        self._free_table(self.root)

    def free(self, sz):
        """Free ``sz`` bytes of user memory, then the page-table pages."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self.free_walk()

    def copy_to(self, other, sz):
        """Copy the first ``sz`` bytes of memory and mappings into ``other``.

        On failure the pages already copied into ``other`` are freed.
        """
        i = 0
        try:
            for i in range(0, sz, PGSIZE):
                slot = self.walk(i, False)
                if slot is None:
                    raise KernelPanic("uvmcopy: pte should exist")
                pte = self.memory.load_pte(slot)
                if not pte & PTE_V:
                    raise KernelPanic("uvmcopy: page not present")
                mem = self.memory.kalloc()
                self.memory.write(mem, self.memory.read(pte2pa(pte), PGSIZE))
                try:
                    other.map_pages(i, PGSIZE, mem, pte_flags(pte))
                except OutOfMemoryError:
                    self.memory.kfree(mem)
                    raise
        except OutOfMemoryError:
            other.unmap(0, i // PGSIZE, True)
            raise

    def clear_user(self, va):
        """Remove user access from the page at ``va`` (used for stack guard pages)."""
        slot = self.walk(va, False)
        if slot is None:
            raise KernelPanic("uvmclear")
        self.memory.store_pte(slot, self.memory.load_pte(slot) & ~PTE_U)

    def _user_chunks(self, va, length):
        """Yield (physical address, count) pieces covering ``length`` bytes at ``va``."""
        while length > 0:
            va0 = pg_round_down(va)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddressError(f"user address {va:#x} is not mapped")
            n = min(PGSIZE - (va - va0), length)
            yield pa0 + (va - va0), n
            length -= n
            va = va0 + PGSIZE

    def copy_out(self, dstva, data):
        """Copy ``data`` from the kernel to user address ``dstva``."""
        pos = 0
        for pa, n in self._user_chunks(dstva, len(data)):
            self.memory.write(pa, data[pos:pos + n])
            pos += n

    def copy_in(self, srcva, length):
        """Copy ``length`` bytes from user address ``srcva`` to the kernel."""
        return b"".join(self.memory.read(pa, n) for pa, n in self._user_chunks(srcva, length))

    def copy_in_str(self, srcva, max):
        """Copy a NUL-terminated string of at most ``max`` bytes from user space.

        Returns the bytes before the terminator.
        """
        out = bytearray()
        while max > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise BadAddressError(f"user address {srcva:#x} is not mapped")
            n = min(PGSIZE - (srcva - va0), max)
            chunk = self.memory.read(pa0 + (srcva - va0), n)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            max -= n
            srcva = va0 + PGSIZE
        raise BadAddressError("string not terminated within limit")