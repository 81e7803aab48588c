"""Unit tests for contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

import pytest
from pydantic import Field

from opbind.binding.contract import (
    BLANK_MESSAGE,
    Contract,
    PopulateIfEmpty,
    Presence,
    is_blank,
    nested_contract_class,
)
from opbind.core.exceptions import ConfigurationError


@dataclass
class Artist:
    name: str | None = None


@dataclass
class Album:
    title: str | None = None
    artist: Artist | None = None
    year: int | None = None


class ArtistContract(Contract):
    name: Annotated[str | None, Presence()] = None


class AlbumContract(Contract):
    title: Annotated[str | None, Presence()] = None
    artist: Annotated[ArtistContract | None, PopulateIfEmpty(Artist)] = None
    year: Annotated[int | None, Field(ge=1900)] = None


@pytest.mark.unit
class TestHelpers:
    """Test module-level helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, True),
            ("", True),
            ("   ", True),
            ([], True),
            ({}, True),
            ("Gary Moore", False),
            (0, False),
            (False, False),
        ],
    )
    def test_is_blank(self, value: object, expected: bool) -> None:
        """Verify what counts as blank for presence checks."""
        assert is_blank(value) is expected

    def test_nested_contract_class(self) -> None:
        """Verify nested contracts are found inside optional annotations."""
        assert nested_contract_class(ArtistContract | None) is ArtistContract
        assert nested_contract_class(ArtistContract) is ArtistContract
        assert nested_contract_class(str | None) is None


@pytest.mark.unit
class TestFromModel:
    """Test wrapping domain objects."""

    def test_wraps_nested_models(self) -> None:
        """Verify nested domain objects become nested contracts."""
        album = Album("After The War", Artist("Gary Moore"))

        contract = AlbumContract.from_model(album)

        assert contract.model is album
        assert contract.title == "After The War"
        assert isinstance(contract.artist, ArtistContract)
        assert contract.artist.name == "Gary Moore"
        assert contract.artist.model is album.artist

    def test_empty_model(self) -> None:
        """Verify a bare model yields an empty contract."""
        contract = AlbumContract.from_model(Album())

        assert contract.title is None
        assert contract.artist is None
        assert contract.errors == {}

    def test_no_model(self) -> None:
        """Verify contracts can be built without a model."""
        contract = AlbumContract.from_model(None)

        assert contract.model is None
        assert contract.sync() is None


@pytest.mark.unit
class TestIsValid:
    """Test field validation."""

    def test_valid_contract(self) -> None:
        """Verify a fully populated contract has no errors."""
        contract = AlbumContract.from_model(
            Album("Run For Cover", Artist("Gary Moore"), 1985)
        )

        assert contract.is_valid() is True
        assert contract.errors == {}

    def test_presence_errors(self) -> None:
        """Verify blank required fields are reported."""
        contract = AlbumContract.from_model(Album(title="  "))

        assert contract.is_valid() is False
        assert contract.errors == {"title": [BLANK_MESSAGE]}

    def test_nested_errors_use_dotted_paths(self) -> None:
        """Verify nested contract errors are prefixed with the field name."""
        contract = AlbumContract.from_model(Album("Run For Cover", Artist()))

        assert contract.is_valid() is False
        assert contract.errors == {"artist.name": [BLANK_MESSAGE]}

    def test_pydantic_constraints(self) -> None:
        """Verify pydantic constraints and types are enforced."""
        contract = AlbumContract.from_model(Album("Run For Cover", year=1800))

        assert contract.is_valid() is False
        assert list(contract.errors) == ["year"]

    def test_coerced_values_are_kept(self) -> None:
        """Verify values converted by pydantic replace the raw input."""
        album = Album(title="Run For Cover")
        contract = AlbumContract.from_model(album)
        contract.year = "1999"  # type: ignore[assignment]

        assert contract.is_valid() is True
        assert contract.year == 1999

        contract.sync()

        assert album.year == 1999

    def test_type_errors(self) -> None:
        """Verify values of the wrong type are reported."""
        contract = AlbumContract.from_model(Album(title="Wild Frontier"))
        contract.year = "soon"  # type: ignore[assignment]

        assert contract.is_valid() is False
        assert "year" in contract.errors

    def test_errors_reset_on_revalidation(self) -> None:
        """Verify fixing a field clears its error."""
        contract = AlbumContract.from_model(Album())
        assert contract.is_valid() is False

        contract.title = "Wild Frontier"

        assert contract.is_valid() is True
        assert contract.errors == {}


@pytest.mark.unit
class TestBuildNestedAndSync:
    """Test nested population and syncing back to the model."""

    def test_build_nested_populates_model(self) -> None:
        """Verify PopulateIfEmpty creates a fresh domain object."""
        contract = AlbumContract.from_model(Album())

        nested = contract.build_nested("artist")

        assert isinstance(nested, ArtistContract)
        assert isinstance(nested.model, Artist)

    def test_build_nested_rejects_plain_fields(self) -> None:
        """Verify only nested contract fields can be built."""
        contract = AlbumContract.from_model(Album())

        with pytest.raises(ConfigurationError, match="not a nested contract field"):
            contract.build_nested("title")

    def test_sync_writes_back(self) -> None:
        """Verify sync copies values and attaches new nested models."""
        album = Album()
        contract = AlbumContract.from_model(album)
        contract.title = "Run For Cover"
        contract.artist = contract.build_nested("artist")
        contract.artist.name = "Gary Moore"

        assert contract.sync() is album
        assert album == Album("Run For Cover", Artist("Gary Moore"))
