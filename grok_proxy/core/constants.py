"""Wire-level constants shared by the converters and the dispatcher."""


class Constants:
    # Inbound path fragments, in match order
    PATH_CHAT_COMPLETIONS = "/chat/completions"
    PATH_COMPLETIONS = "/completions"
    PATH_EMBEDDINGS = "/embeddings"
    PATH_MODELS = "/models"

    # Upstream roles
    ROLE_SYSTEM = "system"
    ROLE_USER = "user"
    ROLE_MODEL = "model"
    ROLE_ASSISTANT = "assistant"

    # OpenAI object names
    OBJECT_CHAT_COMPLETION = "chat.completion"
    OBJECT_CHAT_COMPLETION_CHUNK = "chat.completion.chunk"
    OBJECT_TEXT_COMPLETION = "text_completion"
    OBJECT_TEXT_COMPLETION_CHUNK = "text_completion.chunk"
    OBJECT_LIST = "list"
    OBJECT_EMBEDDING = "embedding"
    OBJECT_MODEL = "model"

    # Response id prefixes
    CHAT_ID_PREFIX = "chatcmpl"
    COMPLETION_ID_PREFIX = "cmpl"

    # Request defaults applied when the caller omits a field
    DEFAULT_TEMPERATURE = 1.0
    DEFAULT_MAX_TOKENS = 1024
    DEFAULT_TOP_P = 1

    FINISH_STOP = "stop"

    # Static model listing
    MODEL_CREATED = 1699488000
    MODEL_OWNER = "grok"

    # SSE framing
    SSE_DATA_PREFIX = "data:"
    SSE_FRAME_TERMINATOR = "\n\n"
    SSE_DONE = "[DONE]"
