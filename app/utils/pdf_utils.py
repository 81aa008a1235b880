import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from langchain_community.document_loaders import PyPDFLoader

from config.context_prompt import PAGE_MARKER, EXTRACTION_ERROR_TEMPLATE
from utils.models import Document

logger = logging.getLogger(__name__)


def load_pdf_text(path: Path) -> str:
    """Load a PDF and join its pages, each preceded by a page marker.

    PyPDFLoader returns one Document per page with a 0-based 'page' in metadata.
    """
    loader = PyPDFLoader(str(path))
    page_docs = loader.load()

    pages = []
    for i, page_doc in enumerate(page_docs):
        page_num = int(page_doc.metadata.get("page", i)) + 1
        pages.append(f"{PAGE_MARKER.format(page=page_num)}\n{page_doc.page_content}")
    return "\n\n".join(pages)


def _pdf_bytes_to_text(data: bytes) -> str:
    # PyPDFLoader wants a path; the upload only lives in memory
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=".pdf")
    tmp_path = tmp.name
    try:
        with tmp:
            tmp.write(data)
        return load_pdf_text(Path(tmp_path))
    finally:
        os.unlink(tmp_path)


def extract_text(name: str, data: bytes) -> str:
    if Path(name).suffix.lower() == ".pdf":
        return _pdf_bytes_to_text(data)
    return data.decode("utf-8", errors="replace")


def read_uploaded_file(uploaded_file) -> Document:
    """Turn a Streamlit UploadedFile into a Document.

    A file that cannot be read is still returned, with an error placeholder as
    its content, so one bad upload does not block the rest of the batch.
    """
    name = uploaded_file.name
    content_type = getattr(uploaded_file, "type", None) or "text/plain"
    try:
        text = extract_text(name, uploaded_file.getvalue())
    except Exception as e:
        logger.warning("Could not extract text from %s: %s", name, e)
        text = EXTRACTION_ERROR_TEMPLATE.format(name=name, reason=e)
    return Document.from_text(name=name, content=text, type=content_type)


def read_uploaded_files(uploaded_files: Iterable) -> List[Document]:
    return [read_uploaded_file(f) for f in uploaded_files]
