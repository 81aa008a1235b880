# Hard-coded system prompt (unchangable by user)
SYSTEM_CONTEXT_PROMPT = (
    "You are an intelligent RAG (Retrieval Augmented Generation) assistant.\n"
    "Your goal is to answer the user's question using ONLY the provided documents below.\n"
    "\n"
    "Instructions:\n"
    "1. Answer only from the provided documents.\n"
    "2. If the answer is found in the documents, provide a clear, concise answer and cite the document name.\n"
    "3. If the answer is NOT in the documents, politely state that the information is not available in the knowledge base.\n"
    "4. Do not make up information outside of the provided context.\n"
    "5. Maintain a helpful and professional tone."
)

LANGUAGE_INSTRUCTIONS = {
    "en": "Respond in English.",
    "am": "Respond in Amharic (አማርኛ), regardless of the language of the documents.",
}

TRUNCATION_NOTICE = (
    "NOTE: The knowledge base was too large for the context window and has been truncated. "
    "Tell the user if the answer may be incomplete because some documents were cut or omitted."
)

KNOWLEDGE_BASE_HEADER = "KNOWLEDGE BASE:"

# Document wrapper markup
DOCUMENT_START = "--- START DOCUMENT: {name} ---\n"
DOCUMENT_END = "\n--- END DOCUMENT: {name} ---"
DOCUMENT_SEPARATOR = "\n\n"
TRUNCATION_MARKER = "\n...[TRUNCATED: document exceeds the context window limit]"
PAGE_MARKER = "--- Page {page} ---"

# User-facing notices
EMPTY_RESPONSE_FALLBACK = {
    "en": "I processed the documents but couldn't generate a text response.",
    "am": "ሰነዶቹን አስኬጃለሁ፣ ነገር ግን የጽሑፍ ምላሽ መፍጠር አልቻልኩም።",
}

QUOTA_EXCEEDED_MESSAGE = (
    "Quota exceeded: the Gemini API rate limit was reached. Please wait a minute and try again."
)
GENERIC_ERROR_MESSAGE = "An error occurred while communicating with Gemini."
MISSING_API_KEY_MESSAGE = "Please provide a Gemini API Key to continue."

WELCOME_MESSAGE = {
    "en": "Hello! I'm your RAG Assistant. Upload documents on the left, and I'll answer questions based on their content.",
    "am": "ሰላም! እኔ የእርስዎ RAG ረዳት ነኝ። በግራ በኩል ሰነዶችን ይስቀሉ፣ በይዘታቸው ላይ ተመስርቼ ጥያቄዎችን እመልሳለሁ።",
}

CHAT_CLEARED_MESSAGE = {
    "en": "Chat history cleared. I'm ready for new questions about your documents.",
    "am": "የውይይት ታሪክ ተሰርዟል። ስለ ሰነዶችዎ አዳዲስ ጥያቄዎችን ለመመለስ ዝግጁ ነኝ።",
}

EXTRACTION_ERROR_TEMPLATE = "[Error extracting text from {name}: {reason}]"
