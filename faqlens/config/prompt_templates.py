"""
FAQLens - Prompt Templates
===========================
Centralised prompt management for the FAQ augmentation flow.  All prompt
text lives here so it can be versioned and reviewed independently of
application logic.

Exports
-------
SYSTEM_PROMPT, CLASSIFICATION_LABELS, CLASSIFICATION_INSTRUCTION,
QUESTION_LABEL, FAQ_CONTEXT_TEMPLATE, CONTACT_PAGE, SUPPORT_EMAIL.
"""

# ══════════════════════════════════════════════════════════════════════
#  SUPPORT CONTACTS
# ══════════════════════════════════════════════════════════════════════

CONTACT_PAGE: str = "https://yoursite.com/contact-us"
SUPPORT_EMAIL: str = "support@yoursite.com"


# ══════════════════════════════════════════════════════════════════════
#  SYSTEM PROMPT (answer generation)
# ══════════════════════════════════════════════════════════════════════

SYSTEM_PROMPT: str = f"""You are a helpful AI assistant for Frequently Asked Questions. Follow these guidelines:
- Be concise and to the point in all responses
- Do not include any other text than the answer to the question
- Do not respond to questions that are not related to the FAQs
- Only answer questions you're certain about, otherwise say "I don't know" and ask the user to contact support
- For further assistance, direct users to:
  • Contact page: {CONTACT_PAGE}
  • Support email: {SUPPORT_EMAIL}"""


# ══════════════════════════════════════════════════════════════════════
#  QUESTION CLASSIFICATION
# ══════════════════════════════════════════════════════════════════════

QUESTION_LABEL: str = "question"
OTHER_LABEL: str = "other"
CLASSIFICATION_LABELS: tuple[str, str] = (QUESTION_LABEL, OTHER_LABEL)

CLASSIFICATION_INSTRUCTION: str = "Classify the user message as a question or other. Consider the message a question if it directly asks something or seeks information."


# ══════════════════════════════════════════════════════════════════════
#  FAQ CONTEXT INJECTION
# ══════════════════════════════════════════════════════════════════════
# Prepended to the user's original content parts when a FAQ matches.

FAQ_CONTEXT_TEMPLATE: str = """Here is a potentially relevant FAQ that might help answer the user's question:

Q: {question}
A: {answer}

---

User's question:"""
