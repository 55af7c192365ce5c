"""Built-in teaching material: sample document, default queries, mock schema
and the code snippets shown next to each step."""

from .sql import ColumnSchema, TableSchema
from .steps import AgentStep, DocumentStep, PipelineMode, SqlStep, Step

SAMPLE_DOC = """The Future of AI Architecture Guidelines.
Rule 1: All documents must be split into chunks of 512 tokens or less to ensure context window compliance.
Rule 2: Semantic embeddings must be generated using high-dimensionality vector models (768+ dims).
Rule 3: Vector databases like Pinecone or Chroma should be used for indexing and fast metadata-filtered retrieval.
Rule 4: Grounding is mandatory. Every AI response must cite the specific source chunk to prevent hallucinations.
Rule 5: Hybrid search is recommended. Use a combination of BM25 and Vector search for the best results.
Rule 6: Privacy first. Ensure all sensitive data is redacted before chunking into the shared vector store.
Rule 7: Real-time updates. The vector index should be refreshed every 24 hours to include the latest corporate reports."""

# Name used when no document was supplied at all
FALLBACK_DOCUMENT_NAME = "Simulation.pdf"

# Name used by the "load sample" command
SAMPLE_DOCUMENT_NAME = "AI_Architecture_Guidelines.pdf"
SAMPLE_QUERY = "Summarize Rule 2."

DEFAULT_QUERIES: dict[PipelineMode, str] = {
    PipelineMode.DOCUMENT: "What do the guidelines say about grounding?",
    PipelineMode.AGENTIC: "Which rules keep AI answers grounded and up to date?",
    PipelineMode.SQL: "What was the total revenue per region last year?",
}

MOCK_DB_SCHEMA: list[TableSchema] = [
    TableSchema(
        name="corporate_reports",
        columns=[
            ColumnSchema(name="report_id", type="UUID", description="Primary Key"),
            ColumnSchema(name="year", type="INT", description="Fiscal Year"),
            ColumnSchema(name="revenue", type="DECIMAL", description="Total Revenue"),
            ColumnSchema(name="net_income", type="DECIMAL", description="Profit after taxes"),
            ColumnSchema(name="region", type="STRING", description="Global region"),
        ],
    ),
    TableSchema(
        name="document_metadata",
        columns=[
            ColumnSchema(name="doc_id", type="UUID", description="Link to RAG store"),
            ColumnSchema(name="author", type="STRING", description="Content creator"),
            ColumnSchema(name="last_updated", type="TIMESTAMP", description="Version control"),
        ],
    ),
]

CODE_SNIPPETS: dict[str, str] = {
    "CHUNKING": """from langchain.text_splitter import RecursiveCharacterTextSplitter

text_splitter = RecursiveCharacterTextSplitter(
    chunk_size=512,
    chunk_overlap=64,
    separators=["\\n\\n", "\\n", " ", ""]
)
chunks = text_splitter.split_text(raw_document)""",

    "EMBEDDING": """from langchain_google_genai import GoogleGenerativeAIEmbeddings

embeddings = GoogleGenerativeAIEmbeddings(model="models/text-embedding-004")
vector_dims = 768  # Dimensionality of the vector space
vector_data = embeddings.embed_documents(chunks)""",

    "RETRIEVAL": """from langchain_community.vectorstores import FAISS

# Initialize Vector Index
db = FAISS.from_documents(chunks, embeddings)

# Perform Semantic Similarity Search
retrieved_docs = db.similarity_search_with_relevance_scores(
    query,
    k=3,
    score_threshold=0.8
)""",

    "AGENT": """from langchain.agents import AgentExecutor, create_react_agent

agent = create_react_agent(llm, tools=[search_knowledge_base], prompt=react_prompt)
executor = AgentExecutor(agent=agent, tools=[search_knowledge_base])
result = executor.invoke({"input": task})""",

    "SQL_GEN": """from langchain.chains import create_sql_query_chain

# System leverages RAG-retrieved Schema context to generate SQL
chain = create_sql_query_chain(llm, db)
sql_query = chain.invoke({"question": user_query})
# Executes: SELECT SUM(revenue) FROM sales WHERE region = 'West'""",

    "DONE": "# Final synthesis from context...\n# Status: COMPLETED",
}

_SNIPPET_BY_STEP: dict[Step, str] = {
    DocumentStep.CHUNKING: "CHUNKING",
    DocumentStep.EMBEDDING: "EMBEDDING",
    DocumentStep.STORING: "RETRIEVAL",
    DocumentStep.RETRIEVING: "RETRIEVAL",
    DocumentStep.GENERATING: "DONE",
    AgentStep.ANALYZING_TASK: "AGENT",
    AgentStep.PLANNING: "AGENT",
    AgentStep.TOOL_EXECUTION: "RETRIEVAL",
    AgentStep.REASONING: "AGENT",
    AgentStep.SYNTHESIZING: "DONE",
}


def snippet_for(step: Step) -> str | None:
    """Return the code snippet shown alongside a step, if it has one.

    Every SQL step shows the query-chain snippet; document and agent steps
    without a dedicated snippet (IDLE, UPLOADING) return None.
    """
    if isinstance(step, SqlStep):
        return CODE_SNIPPETS["SQL_GEN"]
    key = _SNIPPET_BY_STEP.get(step)
    return CODE_SNIPPETS[key] if key else None
