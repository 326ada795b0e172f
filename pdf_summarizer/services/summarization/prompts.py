# Instruction templates for the summarization strategies.
#
# Slots are filled with str.format():
#   {language}   output language (SUMMARY_LANGUAGE)
#   {text}       document or chunk text
#   {count}      number of documents
#   {documents}  labelled, concatenated document texts
#   {summaries}  labelled, concatenated per-document summaries
#
# Literal braces inside document text are safe: format() only parses the
# template, never the substituted values.

# =============================================================================
# SINGLE DOCUMENT (stuff)
# =============================================================================
SINGLE_DOCUMENT_PROMPT = """You are an expert in document analysis and synthesis.
Your task is to write clear, concise and comprehensive summaries.

Guidelines:
- Write the summary in {language}
- Capture the main points and key information
- Keep the logical structure of the original content
- Be objective and precise
- Keep the summary informative but concise

Please provide a comprehensive summary of the following document:

{text}

SUMMARY:"""

# =============================================================================
# MULTIPLE DOCUMENTS (stuff)
# =============================================================================
MULTI_DOCUMENT_PROMPT = """You are a document analyst specialised in integrated synthesis.
Your task is to analyse several documents and write one integrated summary.

Guidelines:
- Write the summary in {language}
- Identify common themes and connections between the documents
- Highlight important differences or contradictions
- Synthesise the information into a coherent narrative
- Reference which document contains each piece of information when relevant

Analyse the following {count} documents and provide an integrated summary of their main information:

{documents}

INTEGRATED SUMMARY:"""

# =============================================================================
# MAP-REDUCE
# =============================================================================
MAP_PROMPT = """Write a concise summary of the following excerpt in {language}:

"{text}"

CONCISE SUMMARY:"""

REDUCE_PROMPT = """The following are summaries of different parts of one document:

{text}

Combine these summaries into a final, consolidated and coherent summary in {language}.

FINAL SUMMARY:"""

# =============================================================================
# HIERARCHICAL
# =============================================================================
HIERARCHICAL_COMBINE_PROMPT = """You received summaries of {count} different documents.
Write a final integrated summary in {language} that:
- Synthesises the main information of all documents
- Identifies common themes and points
- Highlights important differences
- Is coherent and well structured

Document summaries:

{summaries}

FINAL INTEGRATED SUMMARY:"""

# Probe prompt used by the connectivity check
CONNECTION_TEST_PROMPT = "Hello"

# Headers used when concatenating documents and summaries
DOCUMENT_HEADER = "--- Document {index}: {name} ---"
SUMMARY_HEADER = "--- Summary of Document {index}: {name} ---"
SECTION_SEPARATOR = "\n\n"
