"""
Unit tests for Mapper.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel

from mdb_crud.repositories import TrackedEntity
from mdb_crud.services import Mapper


@dataclass(kw_only=True)
class Book(TrackedEntity):
    title: str = ""
    author: str = ""
    pages: int = 0


class BookAdd(BaseModel):
    title: str
    author: str
    isbn: str = ""


class BookUpdate(BaseModel):
    id: str | None = None
    title: str | None = None
    pages: int | None = None


class BookView(BaseModel):
    id: str
    title: str
    pages: int


class TestMap:
    def test_model_to_entity_copies_shared_fields(self, mapper):
        book = mapper.map(BookAdd(title="Dune", author="Herbert", isbn="x"), Book)

        assert isinstance(book, Book)
        assert book.title == "Dune"
        assert book.author == "Herbert"
        assert book.id  # generated
        assert book.is_deleted is False

    def test_entity_to_view(self, mapper):
        book = Book(id="b1", title="Emma", pages=320)
        view = mapper.map(book, BookView)
        assert view == BookView(id="b1", title="Emma", pages=320)

    def test_map_many(self, mapper):
        views = mapper.map_many([Book(id="1", title="a"), Book(id="2", title="b")], BookView)
        assert [v.id for v in views] == ["1", "2"]

    def test_registered_converter_wins(self, mapper):
        mapper.register(BookAdd, Book, lambda m: Book(title=m.title.upper()))
        assert mapper.map(BookAdd(title="ulysses", author="Joyce"), Book).title == "ULYSSES"

    def test_unmappable_type_raises(self, mapper):
        with pytest.raises(TypeError):
            mapper.map({"title": "raw dict"}, Book)


class TestMapOnto:
    def test_only_explicitly_set_fields_are_overlaid(self, mapper):
        book = Book(title="Old", author="Someone", pages=10)

        result = mapper.map_onto(BookUpdate(pages=99), book)

        assert result is book
        assert book.pages == 99
        assert book.title == "Old"
        assert book.author == "Someone"

    def test_explicit_none_is_overlaid(self, mapper):
        book = Book(title="Old")
        mapper.map_onto(BookUpdate(title=None), book)
        assert book.title is None

    def test_id_is_never_overlaid(self, mapper):
        book = Book(id="keep", title="t")
        mapper.map_onto(BookUpdate(id="other", title="n"), book)
        assert book.id == "keep"
        assert book.title == "n"

    def test_tracking_fields_are_never_overlaid(self, mapper):
        class BookRestore(BaseModel):
            title: str | None = None
            is_deleted: bool | None = None
            date_created: datetime | None = None

        book = Book(title="t")
        created = book.date_created

        restore = BookRestore(
            title="n", is_deleted=True, date_created=datetime(2000, 1, 1, tzinfo=timezone.utc)
        )
        mapper.map_onto(restore, book)

        assert book.title == "n"
        assert book.is_deleted is False
        assert book.date_created == created

    def test_registered_merger_wins(self):
        mapper = Mapper()

        def merge(update: BookUpdate, book: Book) -> Book:
            book.pages += update.pages or 0
            return book

        mapper.register_merge(BookUpdate, Book, merge)
        book = Book(pages=100)
        mapper.map_onto(BookUpdate(pages=5), book)
        assert book.pages == 105
