from .knowledge_base import (
    ACTIONS,
    GENERAL_ACTIONS,
    GENERAL_PROBLEM,
    SYMPTOM_CAUSES,
    UNIDENTIFIED_ACTIONS,
    UNIDENTIFIED_PROBLEM,
    KnowledgeBaseError,
    actions_for,
    causes_for,
    symptoms_for,
    validate_knowledge_base,
)
