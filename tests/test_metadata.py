"""Tests for class metadata."""

import pytest

from neogm.metadata import ClassMetadata, MetadataCache
from tests.fakes import Person


class Movie:
    __node_identifier__ = "m"
    __node_id_field__ = "uid"


@pytest.mark.unit
class TestClassMetadata:
    def test_defaults(self):
        metadata = ClassMetadata.for_class(Person)

        assert metadata.get_node_identifier() == "person"
        assert metadata.id_field == "id"
        assert metadata.class_name == "tests.fakes.Person"

    def test_class_overrides(self):
        metadata = ClassMetadata.for_class(Movie)

        assert metadata.node_identifier == "m"
        movie = Movie()
        metadata.set_id_value(movie, 12)
        assert movie.uid == 12
        assert metadata.get_id_value(movie) == 12

    def test_uninitialised_instance_has_no_identity(self):
        metadata = ClassMetadata.for_class(Person)

        assert metadata.get_id_value(Person.__new__(Person)) is None


@pytest.mark.unit
class TestMetadataCache:
    def test_builds_once(self):
        cache = MetadataCache()

        first = cache.get_class_metadata(Person)

        assert cache.get_class_metadata(Person) is first
        assert Person in cache
        assert len(cache) == 1
