"""Integration tests for the generic CRUD contract, exercised through HomeRepository."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from homemaint.core.exceptions import InvalidInputError
from homemaint.models import Home
from homemaint.repositories import HomeRepository


@pytest.fixture
def repo(session):
    return HomeRepository(session)


class TestCreate:
    async def test_create_assigns_id_and_timestamps(self, repo):
        assert Home(name="Unsaved").id is None
        home = await repo.create(name="Lake House", square_footage=1800)
        assert isinstance(home.id, int)
        assert home.id > 0
        assert home.created_at.tzinfo is not None
        assert home.updated_at.tzinfo is not None

    async def test_ids_are_never_reused(self, repo):
        first = await repo.create(name="First")
        await repo.delete(first.id)
        second = await repo.create(name="Second")
        assert second.id > first.id

    async def test_batch_ids_are_distinct_positive_integers(self, repo):
        homes = [await repo.create(name=f"Home {n}") for n in range(5)]
        ids = [home.id for home in homes]
        assert all(isinstance(i, int) and i > 0 for i in ids)
        assert len(set(ids)) == len(ids)

    async def test_datetimes_round_trip_as_utc(self, repo):
        purchased = datetime(2019, 4, 1, 9, 30, tzinfo=UTC)
        home = await repo.create(name="Cabin", purchase_date=purchased)
        reloaded = await repo.find_by_id(home.id)
        assert reloaded.purchase_date == purchased

    async def test_missing_required_field(self, repo):
        with pytest.raises(InvalidInputError) as exc_info:
            await repo.create(address="1 Main St")
        assert exc_info.value.details == {"field": "name", "constraint": "required"}

    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_blank_required_field(self, repo, name):
        with pytest.raises(InvalidInputError):
            await repo.create(name=name)

    async def test_wrong_shape_rejected(self, repo):
        with pytest.raises(InvalidInputError) as exc_info:
            await repo.create(name="Home", square_footage="big")
        assert exc_info.value.details["constraint"] == "type"

    async def test_bool_is_not_an_integer(self, repo):
        with pytest.raises(InvalidInputError):
            await repo.create(name="Home", square_footage=True)

    async def test_date_must_be_datetime(self, repo):
        with pytest.raises(InvalidInputError):
            await repo.create(name="Home", purchase_date="2020-01-01")

    async def test_unknown_field_rejected(self, repo):
        with pytest.raises(InvalidInputError) as exc_info:
            await repo.create(name="Home", pool=True)
        assert exc_info.value.details["constraint"] == "unknown_field"

    async def test_explicit_id_rejected(self, repo):
        with pytest.raises(InvalidInputError):
            await repo.create(id=42, name="Home")


class TestRead:
    async def test_find_by_id(self, repo):
        home = await repo.create(name="Home")
        assert (await repo.find_by_id(home.id)).name == "Home"

    async def test_find_by_unknown_id_returns_none(self, repo):
        assert await repo.find_by_id(999) is None

    async def test_find_all_in_id_order(self, repo):
        for name in ("B", "A", "C"):
            await repo.create(name=name)
        assert [h.name for h in await repo.find_all()] == ["B", "A", "C"]

    async def test_count_and_exists(self, repo):
        home = await repo.create(name="Home")
        assert await repo.count() == 1
        assert await repo.exists(home.id)
        assert not await repo.exists(home.id + 1)

    async def test_get_first(self, repo):
        assert await repo.get_first() is None
        first = await repo.create(name="First")
        await repo.create(name="Second")
        assert (await repo.get_first()).id == first.id


class TestUpdate:
    async def test_partial_update(self, repo):
        home = await repo.create(name="Home", address="1 Main St")
        updated = await repo.update(home.id, square_footage=2000)
        assert updated.square_footage == 2000
        assert updated.address == "1 Main St"

    async def test_update_refreshes_updated_at(self, repo):
        home = await repo.create(name="Home")
        before = home.updated_at
        updated = await repo.update(home.id, name="Renamed")
        assert updated.updated_at >= before
        assert updated.created_at == home.created_at

    async def test_clearing_optional_field(self, repo):
        home = await repo.create(name="Home", address="1 Main St")
        updated = await repo.update(home.id, address=None)
        assert updated.address is None

    async def test_update_unknown_id_returns_none(self, repo):
        assert await repo.update(999, name="Nobody") is None

    @pytest.mark.parametrize("field", ["id", "created_at"])
    async def test_immutable_fields(self, repo, field):
        home = await repo.create(name="Home")
        with pytest.raises(InvalidInputError) as exc_info:
            await repo.update(home.id, **{field: None})
        assert exc_info.value.details["constraint"] == "immutable"

    async def test_blank_required_field_on_update(self, repo):
        home = await repo.create(name="Home")
        with pytest.raises(InvalidInputError):
            await repo.update(home.id, name="  ")


class TestDelete:
    async def test_delete_existing(self, repo):
        home = await repo.create(name="Home")
        assert await repo.delete(home.id) is True
        assert await repo.find_by_id(home.id) is None

    async def test_delete_unknown_returns_false(self, repo):
        assert await repo.delete(999) is False

    async def test_delete_all(self, repo):
        await repo.create(name="One")
        await repo.create(name="Two")
        assert await repo.delete_all() == 2
        assert await repo.count() == 0
