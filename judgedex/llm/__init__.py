from judgedex.llm.factory import (
    get_analysis_llm,
    require_llm_credentials,
    clear_llm_cache,
)
