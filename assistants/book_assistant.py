"""Book Assistant: index local books, search them, and look up book metadata."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from agent_kit.agent import Agent, AgentBuilder
from agent_kit.ports import DocumentParser, HttpFetcher, VectorStore
from assistants.catalog import Collaborators, load_behavior


logger = logging.getLogger("Book-Assistant")

BOOKS_NAMESPACE = "books"
OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"


class BookSkills:
    """Skill bodies bound to their storage, parser and HTTP collaborators."""

    def __init__(self, books: VectorStore, parser: DocumentParser, http: HttpFetcher, workdir: Path):
        self.books = books
        self.parser = parser
        self.http = http
        self.workdir = Path(workdir)

    async def index_book(self, book_path: str) -> str:
        """Parse a book file and insert it into the vector store under its file name."""
        file_path = (self.workdir / book_path).resolve()
        if not file_path.exists():
            return f"File resolved path to {file_path} does not exist"

        parsed = await self.parser.parse(str(file_path))
        name = file_path.name
        if await self.books.insert_doc(name, parsed.text):
            logger.info(f"Indexed {name}")
            return f"Book {name} indexed successfully"
        return f"Book {name} indexing failed"

    async def lookup_book(self, user_query: str) -> List[Dict[str, Any]]:
        hits = await self.books.search(user_query, top_k = 5)
        return [hit.as_dict() for hit in hits]

    async def get_book_info(self, book_name: str) -> Union[Dict[str, Any], str]:
        data = await self.http.get_json(OPEN_LIBRARY_SEARCH_URL, params = {"q": book_name})
        docs = (data or {}).get("docs") or []
        if not docs:
            return f"No book information found for: \"{book_name}\""
        return docs[0]


def build_book_assistant(collaborators: Collaborators) -> Agent:
    skills = BookSkills(
        books = collaborators.vector_store(BOOKS_NAMESPACE),
        parser = collaborators.parser,
        http = collaborators.http,
        workdir = collaborators.workdir,
    )

    builder = AgentBuilder(
        id = "book-assistant",
        name = "Book Assistant",
        behavior = load_behavior("book_assistant"),
        model = collaborators.model,
        llm_client = collaborators.llm_client,
    )
    builder.add_skill(
        name = "index_book",
        description = "Use this skill to index a book in a vector database, the user will provide the path to the book",
        process = skills.index_book,
        inputs = {
            "book_path": {"type": "Text", "description": "Path to the book file, relative to the working directory"},
        },
    )
    builder.add_skill(
        name = "lookup_book",
        description = "Use this skill to lookup a book in the vector database",
        process = skills.lookup_book,
        inputs = {
            "user_query": {"type": "Text", "description": "What to look for in the indexed books"},
        },
    )
    builder.add_skill(
        name = "get_book_info",
        description = "Use this skill to get information about a book",
        process = skills.get_book_info,
        inputs = {
            "book_name": {"description": "This need to be a name of a book, extract it from the user query"},
        },
    )
    return builder.build()
