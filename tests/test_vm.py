import pytest

from xv6kit.riscv import MAXVA, PGSIZE, PTE_R, PTE_U, PTE_V, PTE_W, pte2pa, pte_flags
from xv6kit.vm import (
    BadAddressError,
    KernelPanic,
    OutOfMemoryError,
    PageTable,
    PhysicalMemory,
)

NPAGES = 64


@pytest.fixture
def memory():
    return PhysicalMemory(NPAGES)


@pytest.fixture
def table(memory):
    return PageTable.create(memory)


def test_kalloc_and_kfree_balance(memory):
    pa = memory.kalloc()
    assert pa % PGSIZE == 0
    assert memory.free_count() == NPAGES - 1
    memory.kfree(pa)
    assert memory.free_count() == NPAGES


def test_kalloc_exhaustion():
    mem = PhysicalMemory(1)
    mem.kalloc()
    with pytest.raises(OutOfMemoryError):
        mem.kalloc()


def test_kfree_unaligned_panics(memory):
    with pytest.raises(KernelPanic):
        memory.kfree(memory.base + 1)


def test_pte_store_load(memory):
    pa = memory.kalloc()
    memory.store_pte(pa + 8, 0x1234ABCD)
    assert memory.load_pte(pa + 8) == 0x1234ABCD


def test_out_of_range_access_panics(memory):
    with pytest.raises(KernelPanic):
        memory.read(memory.end, 1)


def test_create_uses_one_page(memory, table):
    assert memory.free_count() == NPAGES - 1
    assert memory.read(table.root, PGSIZE) == bytes(PGSIZE)


def test_walk_without_alloc_on_empty(table):
    assert table.walk(PGSIZE, False) is None


def test_walk_alloc_creates_two_levels(memory, table):
    before = memory.free_count()
    slot = table.walk(PGSIZE, True)
    assert slot is not None and memory.load_pte(slot) == 0
    assert memory.free_count() == before - 2
    assert table.walk(PGSIZE, False) == slot


def test_walk_beyond_maxva_panics(table):
    with pytest.raises(KernelPanic):
        table.walk(MAXVA, False)
    assert table.walkaddr(MAXVA) is None


def test_map_and_walkaddr(memory, table):
    pa = memory.kalloc()
    table.map_pages(PGSIZE, PGSIZE, pa, PTE_R | PTE_U)
    assert table.walkaddr(PGSIZE) == pa
    pte = memory.load_pte(table.walk(PGSIZE, False))
    assert pte2pa(pte) == pa
    assert pte_flags(pte) == PTE_R | PTE_U | PTE_V


def test_walkaddr_requires_user_bit(memory, table):
    pa = memory.kalloc()
    table.map_pages(0, PGSIZE, pa, PTE_R | PTE_W)
    assert table.walkaddr(0) is None


def test_remap_panics(memory, table):
    pa = memory.kalloc()
    table.map_pages(0, PGSIZE, pa, PTE_R | PTE_U)
    with pytest.raises(KernelPanic, match="remap"):
        table.map_pages(0, PGSIZE, pa, PTE_R | PTE_U)


def test_map_zero_size_panics(table):
    with pytest.raises(KernelPanic, match="size"):
        table.map_pages(0, 0, 0, PTE_R)


def test_grow_gives_zeroed_user_memory(table):
    assert table.grow(0, 3 * PGSIZE) == 3 * PGSIZE
    assert table.copy_in(0, 3 * PGSIZE) == bytes(3 * PGSIZE)


def test_grow_smaller_returns_old(table):
    assert table.grow(2 * PGSIZE, PGSIZE) == 2 * PGSIZE


def test_shrink_not_smaller_returns_old(table):
    assert table.shrink(PGSIZE, 2 * PGSIZE) == PGSIZE


def test_copy_out_in_round_trip_across_pages(table):
    table.grow(0, 2 * PGSIZE)
    payload = bytes(range(256)) * 3
    start = PGSIZE - 100
    table.copy_out(start, payload)
    assert table.copy_in(start, len(payload)) == payload


def test_copy_out_unmapped_raises(table):
    with pytest.raises(BadAddressError):
        table.copy_out(PGSIZE, b"x")


def test_copy_in_past_end_raises(table):
    table.grow(0, PGSIZE)
    with pytest.raises(BadAddressError):
        table.copy_in(PGSIZE - 4, 8)


def test_copy_in_str(table):
    table.grow(0, 2 * PGSIZE)
    table.copy_out(PGSIZE - 3, b"hello\x00world")
    assert table.copy_in_str(PGSIZE - 3, 100) == b"hello"


def test_copy_in_str_unterminated_raises(table):
    table.grow(0, PGSIZE)
    table.copy_out(0, b"abcdef")
    with pytest.raises(BadAddressError):
        table.copy_in_str(0, 3)


def test_copy_in_str_runs_off_mapping(table):
    table.grow(0, PGSIZE)
    table.copy_out(PGSIZE - 2, b"zz")
    with pytest.raises(BadAddressError):
        table.copy_in_str(PGSIZE - 2, 10)


def test_grow_shrink_free_restores_memory(memory, table):
    table.grow(0, 5 * PGSIZE)
    assert table.shrink(5 * PGSIZE, PGSIZE + 1) == PGSIZE + 1
    assert table.walkaddr(2 * PGSIZE) is None
    assert table.walkaddr(PGSIZE) is not None
    table.free(PGSIZE + 1)
    assert memory.free_count() == NPAGES


def test_grow_out_of_memory_rolls_back():
    mem = PhysicalMemory(6)
    table = PageTable.create(mem)
    with pytest.raises(OutOfMemoryError):
        table.grow(0, 10 * PGSIZE)
    assert table.walkaddr(0) is None
    table.free(0)
    assert mem.free_count() == 6


def test_init_user(memory, table):
    code = b"\x13\x00\x00\x00" * 4
    table.init_user(code)
    assert table.copy_in(0, len(code)) == code
    assert table.copy_in(len(code), 4) == bytes(4)


def test_init_user_too_big_panics(table):
    with pytest.raises(KernelPanic):
        table.init_user(bytes(PGSIZE))


def test_copy_to_duplicates_memory(memory, table):
    table.grow(0, 2 * PGSIZE)
    table.copy_out(10, b"parent data")
    child = PageTable.create(memory)
    table.copy_to(child, 2 * PGSIZE)
    assert child.copy_in(10, 11) == b"parent data"
    assert child.walkaddr(0) != table.walkaddr(0)
    child.copy_out(10, b"CHILD")
    assert table.copy_in(10, 6) == b"parent"


def test_copy_to_failure_frees_child_pages():
    mem = PhysicalMemory(8)
    parent = PageTable.create(mem)
    parent.grow(0, 2 * PGSIZE)
    free_before_child = mem.free_count()
    child = PageTable.create(mem)
    with pytest.raises(OutOfMemoryError):
        parent.copy_to(child, 2 * PGSIZE)
    assert child.walkaddr(0) is None
    child.free(0)
    assert mem.free_count() == free_before_child


def test_clear_user_blocks_access(table):
    table.grow(0, 2 * PGSIZE)
    table.clear_user(0)
    with pytest.raises(BadAddressError):
        table.copy_in(0, 1)
    assert table.copy_in(PGSIZE, 1) == b"\x00"


def test_clear_user_unmapped_panics(table):
    with pytest.raises(KernelPanic, match="uvmclear"):
        table.clear_user(PGSIZE)


def test_unmap_unaligned_panics(table):
    with pytest.raises(KernelPanic, match="not aligned"):
        table.unmap(1, 1, False)


def test_unmap_missing_panics(table):
    table.walk(0, True)
    with pytest.raises(KernelPanic, match="not mapped"):
        table.unmap(0, 1, False)


def test_free_walk_with_leaf_panics(table):
    table.grow(0, PGSIZE)
    with pytest.raises(KernelPanic, match="leaf"):
        table.free_walk()