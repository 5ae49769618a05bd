# Access Hub - Source Package
#
# Modules:
#   - config: Configuration constants and settings loading
#   - errors: Error taxonomy shared by every layer
#   - models: Domain records (requests, offers, sessions, chat messages)
#   - utils: Shared utility functions
#   - auth: Password gate and caller identity
#   - database: Document stores (Supabase, in-memory) and record queries
#   - volunteer: Matching workflow and session chat log
#   - llm: LLM clients and schema-validated generation
#   - community: Community feed (posts, comments, reactions)
#   - tools: Accessibility tools (AAC board, companion chat, easy read, vision, learning)
#   - ui: Streamlit action helpers
