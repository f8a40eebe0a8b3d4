"""Tests for the checkpoint registry."""

from __future__ import annotations

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chain_checkpoints.checkpoints import CheckpointRegistry, CheckResult
from chain_checkpoints.types import Bytes32, CheckpointDecodeError, Difficulty, Uint64
from tests.chain_checkpoints.helpers import make_bytes32, make_hash_hex, make_registry

HASH_A = make_hash_hex(0xAA)
HASH_B = make_hash_hex(0xBB)


class TestAddCheckpoint:
    """Tests for conflict-checked insertion."""

    def test_insert_new_height(self, registry: CheckpointRegistry) -> None:
        """A new height is pinned."""
        assert registry.add_checkpoint(20, HASH_A) is True
        assert registry.get_points()[Uint64(20)] == Bytes32.from_hex(HASH_A)
        assert registry.get_difficulty_points() == {}

    def test_idempotent_reinsert(self, registry: CheckpointRegistry) -> None:
        """The same pair twice succeeds both times and changes nothing."""
        assert registry.add_checkpoint(20, HASH_A, "100")
        before = dict(registry.get_points()), dict(registry.get_difficulty_points())

        assert registry.add_checkpoint(20, HASH_A, "100")

        assert (dict(registry.get_points()), dict(registry.get_difficulty_points())) == before

    def test_conflicting_hash_rejected(self, registry: CheckpointRegistry) -> None:
        """A different hash at a pinned height fails and never overwrites."""
        assert registry.add_checkpoint(20, HASH_A)
        assert registry.add_checkpoint(20, HASH_B) is False
        assert registry.get_points()[Uint64(20)] == Bytes32.from_hex(HASH_A)

    def test_conflicting_hash_does_not_touch_difficulty(
        self, registry: CheckpointRegistry
    ) -> None:
        """A rejected hash leaves the difficulty table alone."""
        assert registry.add_checkpoint(20, HASH_A)
        assert registry.add_checkpoint(20, HASH_B, "5") is False
        assert Uint64(20) not in registry.get_difficulty_points()

    @pytest.mark.parametrize("hash_text", ["", "abc", "0x" + HASH_A[2:], HASH_A + "00", "g" * 64])
    def test_malformed_hash_rejected(self, registry: CheckpointRegistry, hash_text: str) -> None:
        """Undecodable hashes are rejected with no state change."""
        assert registry.add_checkpoint(20, hash_text) is False
        assert len(registry) == 0

    @pytest.mark.parametrize("height", [-1, 2**64, True])
    def test_invalid_height_rejected(self, registry: CheckpointRegistry, height: int) -> None:
        """Heights outside uint64 are rejected without raising."""
        assert registry.add_checkpoint(height, HASH_A) is False
        assert len(registry) == 0

    def test_difficulty_is_pinned(self, registry: CheckpointRegistry) -> None:
        """A non-empty difficulty string pins a difficulty."""
        assert registry.add_checkpoint(20, HASH_A, "559264147197470555383")
        assert registry.get_difficulty_points()[Uint64(20)] == Difficulty(559264147197470555383)

    def test_bad_difficulty_keeps_hash(self, registry: CheckpointRegistry) -> None:
        """A malformed difficulty fails but the hash pin stays committed."""
        assert registry.add_checkpoint(20, HASH_A, "not-a-number") is False
        assert registry.get_points()[Uint64(20)] == Bytes32.from_hex(HASH_A)
        assert registry.get_difficulty_points() == {}

    def test_conflicting_difficulty_rejected(self, registry: CheckpointRegistry) -> None:
        """A different difficulty at a pinned height fails and keeps the original."""
        assert registry.add_checkpoint(20, HASH_A, "100")
        assert registry.add_checkpoint(20, HASH_A, "101") is False
        assert registry.get_difficulty_points()[Uint64(20)] == Difficulty(100)

    def test_difficulty_added_later(self, registry: CheckpointRegistry) -> None:
        """A difficulty can be pinned after the hash was pinned without one."""
        assert registry.add_checkpoint(20, HASH_A)
        assert registry.add_checkpoint(20, HASH_A, "7")
        assert registry.get_difficulty_points()[Uint64(20)] == Difficulty(7)

    def test_rejection_is_logged(
        self, registry: CheckpointRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A conflict leaves a diagnostic in the log."""
        registry.add_checkpoint(20, HASH_A)
        with caplog.at_level(logging.ERROR):
            registry.add_checkpoint(20, HASH_B)
        assert "already exists" in caplog.text

    @given(
        st.lists(
            st.tuples(st.integers(min_value=0, max_value=20), st.integers(0, 3)),
            max_size=40,
        )
    )
    def test_first_successful_hash_wins(self, inserts: list[tuple[int, int]]) -> None:
        """After any sequence of inserts each height holds its first hash."""
        registry = CheckpointRegistry()
        first: dict[int, int] = {}

        for height, seed in inserts:
            ok = registry.add_checkpoint(height, make_hash_hex(seed))
            expected_ok = first.setdefault(height, seed) == seed
            assert ok is expected_ok

        assert {int(h): v for h, v in registry.get_points().items()} == {
            h: make_bytes32(seed) for h, seed in first.items()
        }


class TestCheckpointZone:
    """Tests for is_in_checkpoint_zone."""

    def test_empty_registry(self, registry: CheckpointRegistry) -> None:
        """Nothing is in the zone of an empty registry, not even height 0."""
        assert registry.is_in_checkpoint_zone(0) is False

    @pytest.mark.parametrize("height, expected", [(9, True), (10, True), (50, True), (51, False)])
    def test_zone_boundary(
        self, sparse_registry: CheckpointRegistry, height: int, expected: bool
    ) -> None:
        """The zone ends at the highest pin, inclusive."""
        assert sparse_registry.is_in_checkpoint_zone(height) is expected

    @given(st.sets(st.integers(0, 10_000), min_size=1, max_size=10), st.integers(0, 20_000))
    def test_zone_matches_max_height(self, heights: set[int], query: int) -> None:
        """In zone exactly when at or below the max pinned height."""
        registry = make_registry(*heights)
        assert registry.is_in_checkpoint_zone(query) is (query <= max(heights))


class TestCheckBlock:
    """Tests for check_block."""

    def test_unpinned_height_always_accepted(self, sparse_registry: CheckpointRegistry) -> None:
        """Any hash is fine at an unpinned height."""
        result = sparse_registry.check_block(11, make_bytes32(99))
        assert result == CheckResult(accepted=True, is_a_checkpoint=False)

    def test_matching_hash_accepted(self, sparse_registry: CheckpointRegistry) -> None:
        """The pinned hash passes."""
        result = sparse_registry.check_block(10, make_bytes32(10))
        assert result.accepted is True
        assert result.is_a_checkpoint is True

    def test_mismatched_hash_rejected(
        self, sparse_registry: CheckpointRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A different hash at a pinned height is rejected and logged."""
        with caplog.at_level(logging.WARNING):
            result = sparse_registry.check_block(50, make_bytes32(51))

        assert result == CheckResult(accepted=False, is_a_checkpoint=True)
        assert "CHECKPOINT FAILED FOR HEIGHT 50" in caplog.text

    def test_accepts_uint64_height(self, sparse_registry: CheckpointRegistry) -> None:
        """Uint64 heights work as well as plain ints."""
        assert sparse_registry.check_block(Uint64(50), make_bytes32(50)).accepted

    def test_hex_text_hash(
        self, sparse_registry: CheckpointRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Hex text is decoded; a mismatch is rejected and logged as hex."""
        assert sparse_registry.check_block(10, make_hash_hex(10)).accepted

        with caplog.at_level(logging.WARNING):
            result = sparse_registry.check_block(10, "bb" * 32)

        assert result == CheckResult(accepted=False, is_a_checkpoint=True)
        assert f"FETCHED HASH: {'bb' * 32}" in caplog.text

    def test_malformed_hex_text_raises(self, sparse_registry: CheckpointRegistry) -> None:
        """Text that is not a 64 character hex hash is a decode error."""
        with pytest.raises(CheckpointDecodeError):
            sparse_registry.check_block(10, "0x" + "bb" * 31)

    @given(st.integers(0, 2**64 - 1), st.binary(min_size=32, max_size=32))
    def test_empty_registry_accepts_everything(self, height: int, raw: bytes) -> None:
        """Nothing is pinned, so every block passes."""
        result = CheckpointRegistry().check_block(height, Bytes32(raw))
        assert result == CheckResult(accepted=True, is_a_checkpoint=False)


class TestAlternativeBlocks:
    """Tests for is_alternative_block_allowed."""

    @pytest.fixture
    def pinned_at_100(self) -> CheckpointRegistry:
        """Registry with a single pin at height 100."""
        return make_registry(100)

    @pytest.mark.parametrize(
        "candidate, expected", [(0, False), (1, False), (100, False), (101, True), (150, True)]
    )
    def test_reorg_gating(
        self, pinned_at_100: CheckpointRegistry, candidate: int, expected: bool
    ) -> None:
        """Only blocks above the nearest checkpoint below the tip may change."""
        assert pinned_at_100.is_alternative_block_allowed(150, candidate) is expected

    def test_chain_below_first_checkpoint(self, pinned_at_100: CheckpointRegistry) -> None:
        """Before the first checkpoint anything but height 0 is allowed."""
        assert pinned_at_100.is_alternative_block_allowed(99, 1) is True
        assert pinned_at_100.is_alternative_block_allowed(99, 0) is False

    def test_uses_nearest_checkpoint_at_or_below_tip(self) -> None:
        """Pins above the tip do not matter."""
        registry = make_registry(100, 200)
        assert registry.is_alternative_block_allowed(150, 120) is True
        assert registry.is_alternative_block_allowed(200, 150) is False
        assert registry.is_alternative_block_allowed(200, 201) is True

    def test_empty_registry(self, registry: CheckpointRegistry) -> None:
        """No checkpoints means only height 0 is protected."""
        assert registry.is_alternative_block_allowed(1000, 1) is True
        assert registry.is_alternative_block_allowed(1000, 0) is False


class TestConflicts:
    """Tests for check_for_conflicts."""

    def test_mismatch_is_conflict(self) -> None:
        """Same height with different hashes conflicts."""
        ours, theirs = CheckpointRegistry(), CheckpointRegistry()
        ours.add_checkpoint(20, HASH_A)
        theirs.add_checkpoint(20, HASH_B)
        assert ours.check_for_conflicts(theirs) is False

    def test_equal_hashes_compatible(self) -> None:
        """Same height with equal hashes is compatible."""
        ours, theirs = CheckpointRegistry(), CheckpointRegistry()
        ours.add_checkpoint(20, HASH_A)
        theirs.add_checkpoint(20, HASH_A)
        assert ours.check_for_conflicts(theirs) is True

    def test_disjoint_heights_not_copied(self) -> None:
        """Heights only in the other registry are ignored and not merged."""
        ours, theirs = make_registry(10), make_registry(20)
        assert ours.check_for_conflicts(theirs) is True
        assert list(ours.get_points()) == [Uint64(10)]

    def test_every_conflict_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """All conflicting heights are reported, not just the first."""
        ours, theirs = CheckpointRegistry(), CheckpointRegistry()
        for height in (1, 2):
            ours.add_checkpoint(height, HASH_A)
            theirs.add_checkpoint(height, HASH_B)

        with caplog.at_level(logging.ERROR):
            assert ours.check_for_conflicts(theirs) is False

        assert "height 1" in caplog.text
        assert "height 2" in caplog.text


class TestEntries:
    """Tests for the entry listing."""

    def test_entries_include_difficulty(self, registry: CheckpointRegistry) -> None:
        """Entries pair hashes with their difficulty pins, ascending."""
        registry.add_checkpoint(5, HASH_B)
        registry.add_checkpoint(1, HASH_A, "3")

        entries = registry.entries()

        assert [e.height for e in entries] == [Uint64(1), Uint64(5)]
        assert entries[0].difficulty == Difficulty(3)
        assert entries[1].difficulty is None
