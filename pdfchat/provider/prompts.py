"""System prompt for document-grounded answers."""

DOCUMENT_QA_SYSTEM_PROMPT = (
    "You are a helpful customer agent. You will be provided with the text from a "
    "document, and you should answer the user's questions based on that document. "
    "Here is the document content: \n\n{document_text}\n\n"
    "Give answers formatted in bold and in a readable format."
)


def build_system_prompt(document_text: str) -> str:
    """Embed the full document text verbatim in the system instruction."""
    return DOCUMENT_QA_SYSTEM_PROMPT.format(document_text=document_text)
