# --- Configuration --------------------------------------------------------------------------------
#
# Question text, option labels and flag messages are translation keys resolved
# through assessment.i18n.TRANSLATIONS; nothing in here is language-specific.

AREAS = [
    "procurement",
    "real_property",
    "financial_management",
    "grants_contributions",
    "values_ethics",
    "workplace_health",
    "performance_management",
    "security",
    "service",
    "technology",
    "data",
]

LANGUAGES = ["en", "fr"]

FISCAL_YEARS = ["2023-2024", "2024-2025", "2025-2026", "2026-2027"]

MATURITY_LEVELS = [
    {"value": "initial", "label": "option.maturity.initial", "maturity": 1},
    {"value": "repeatable", "label": "option.maturity.repeatable", "maturity": 2},
    {"value": "defined", "label": "option.maturity.defined", "maturity": 3},
    {"value": "managed", "label": "option.maturity.managed", "maturity": 4},
    {"value": "optimizing", "label": "option.maturity.optimizing", "maturity": 5},
]

YES_NO = [
    {"value": "yes", "label": "option.yes"},
    {"value": "no", "label": "option.no"},
]

FREQUENCY = [
    {"value": "monthly", "label": "option.frequency.monthly"},
    {"value": "quarterly", "label": "option.frequency.quarterly"},
    {"value": "semi_annually", "label": "option.frequency.semi_annually"},
    {"value": "annually", "label": "option.frequency.annually"},
    {"value": "less_than_annually", "label": "option.frequency.less_than_annually"},
    {"value": "never", "label": "option.frequency.never"},
]

PROCESS_STATE = [
    {"value": "comprehensive", "label": "option.process.comprehensive"},
    {"value": "partial", "label": "option.process.partial"},
    {"value": "planned", "label": "option.process.planned"},
    {"value": "none", "label": "option.process.none"},
]


def _options(prefix, values):
    return [{"value": v, "label": f"option.{prefix}.{v}"} for v in values]


# Each question belongs to one area; `flag_if` lists the option values that raise
# a flag, `depends_on` makes the question conditional on an earlier answer.
QUESTIONS = [
    # Procurement
    {
        "id": "proc_1",
        "area": "procurement",
        "type": "single_choice",
        "text": "question.proc_1.text",
        "guidance": "question.proc_1.guidance",
        "options": FREQUENCY,
        "required": True,
        "flag_if": ["annually", "less_than_annually", "never"],
        "flag_text": "question.proc_1.flag",
        "order": 1,
    },
    {
        "id": "proc_2",
        "area": "procurement",
        "type": "single_choice",
        "text": "question.proc_2.text",
        "options": PROCESS_STATE,
        "required": True,
        "flag_if": ["planned", "none"],
        "flag_text": "question.proc_2.flag",
        "order": 2,
    },
    {
        "id": "proc_3",
        "area": "procurement",
        "type": "single_choice",
        "text": "question.proc_3.text",
        "options": PROCESS_STATE,
        "required": True,
        "flag_if": ["planned", "none"],
        "flag_text": "question.proc_3.flag",
        "order": 3,
    },
    {
        "id": "proc_4",
        "area": "procurement",
        "type": "single_choice",
        "text": "question.proc_4.text",
        "options": _options(
            "capacity", ["within_1y", "within_2y", "within_3y", "planned", "none"]
        ),
        "required": True,
        "flag_if": ["planned", "none"],
        "flag_text": "question.proc_4.flag",
        "order": 4,
    },
    {
        "id": "proc_4a",
        "area": "procurement",
        "type": "long_text",
        "text": "question.proc_4a.text",
        "required": True,
        "depends_on": {"question": "proc_4", "values": ["planned", "none"]},
        "max_length": 1000,
        "order": 5,
    },
    {
        "id": "proc_5",
        "area": "procurement",
        "type": "single_choice",
        "text": "question.proc_5.text",
        "guidance": "question.proc_5.guidance",
        "options": MATURITY_LEVELS,
        "required": True,
        "flag_if": ["initial"],
        "flag_text": "question.proc_5.flag",
        "order": 6,
    },
    {
        "id": "proc_6",
        "area": "procurement",
        "type": "single_choice",
        "text": "question.proc_6.text",
        "options": MATURITY_LEVELS,
        "required": True,
        "flag_if": ["initial"],
        "order": 7,
    },
    # Real Property
    {
        "id": "rp_1",
        "area": "real_property",
        "type": "single_choice",
        "text": "question.rp_1.text",
        "options": FREQUENCY,
        "required": True,
        "flag_if": ["less_than_annually", "never"],
        "flag_text": "question.rp_1.flag",
        "order": 1,
    },
    {
        "id": "rp_2",
        "area": "real_property",
        "type": "single_choice",
        "text": "question.rp_2.text",
        "options": _options(
            "condition",
            [
                "improved_significantly",
                "improved_slightly",
                "stable",
                "deteriorated_slightly",
                "deteriorated_significantly",
                "not_applicable",
            ],
        ),
        "required": True,
        "flag_if": ["deteriorated_significantly"],
        "flag_text": "question.rp_2.flag",
        "order": 2,
    },
    {
        "id": "rp_3",
        "area": "real_property",
        "type": "single_choice",
        "text": "question.rp_3.text",
        "options": _options(
            "documentation",
            ["all", "most", "some", "few", "very_few", "none", "not_applicable"],
        ),
        "required": True,
        "flag_if": ["few", "very_few", "none"],
        "flag_text": "question.rp_3.flag",
        "order": 3,
    },
    {
        "id": "rp_4",
        "area": "real_property",
        "type": "single_choice",
        "text": "question.rp_4.text",
        "options": MATURITY_LEVELS,
        "required": True,
        "flag_if": ["initial"],
        "flag_text": "question.rp_4.flag",
        "order": 4,
    },
    # Security
    {
        "id": "sec_1",
        "area": "security",
        "type": "single_choice",
        "text": "question.sec_1.text",
        "options": FREQUENCY,
        "required": True,
        "flag_if": ["annually", "less_than_annually", "never"],
        "flag_text": "question.sec_1.flag",
        "order": 1,
    },
    {
        "id": "sec_2",
        "area": "security",
        "type": "single_choice",
        "text": "question.sec_2.text",
        "options": YES_NO,
        "required": True,
        "flag_if": ["no"],
        "flag_text": "question.sec_2.flag",
        "order": 2,
    },
    {
        "id": "sec_2a",
        "area": "security",
        "type": "free_text",
        "text": "question.sec_2a.text",
        "required": True,
        "depends_on": {"question": "sec_2", "values": "no"},
        "max_length": 200,
        "order": 3,
    },
    {
        "id": "sec_3",
        "area": "security",
        "type": "multi_choice",
        "text": "question.sec_3.text",
        "options": _options(
            "controls", ["mfa", "encryption", "logging", "patches", "backups", "none"]
        ),
        "required": True,
        "flag_if": ["none"],
        "flag_text": "question.sec_3.flag",
        "min_selections": 1,
        "order": 4,
    },
    {
        "id": "sec_3a",
        "area": "security",
        "type": "long_text",
        "text": "question.sec_3a.text",
        "required": True,
        "depends_on": {"question": "sec_3", "values": ["none"]},
        "max_length": 1000,
        "order": 5,
    },
    {
        "id": "sec_4",
        "area": "security",
        "type": "single_choice",
        "text": "question.sec_4.text",
        "options": MATURITY_LEVELS,
        "required": True,
        "flag_if": ["initial", "repeatable"],
        "flag_text": "question.sec_4.flag",
        "order": 6,
    },
    # Technology
    {
        "id": "tech_1",
        "area": "technology",
        "type": "single_choice",
        "text": "question.tech_1.text",
        "guidance": "question.tech_1.guidance",
        "options": YES_NO,
        "required": True,
        "flag_if": ["no"],
        "flag_text": "question.tech_1.flag",
        "order": 1,
    },
    {
        "id": "tech_2",
        "area": "technology",
        "type": "single_choice",
        "text": "question.tech_2.text",
        "options": MATURITY_LEVELS,
        "required": True,
        "flag_if": ["initial", "repeatable"],
        "flag_text": "question.tech_2.flag",
        "order": 2,
    },
    {
        "id": "tech_3",
        "area": "technology",
        "type": "long_text",
        "text": "question.tech_3.text",
        "required": False,
        "max_length": 1000,
        "order": 3,
    },
    # Data
    {
        "id": "data_1",
        "area": "data",
        "type": "single_choice",
        "text": "question.data_1.text",
        "options": YES_NO,
        "required": True,
        "flag_if": ["no"],
        "flag_text": "question.data_1.flag",
        "order": 1,
    },
    {
        "id": "data_2",
        "area": "data",
        "type": "single_choice",
        "text": "question.data_2.text",
        "options": FREQUENCY,
        "required": True,
        "flag_if": ["annually", "less_than_annually", "never"],
        "flag_text": "question.data_2.flag",
        "order": 2,
    },
    {
        "id": "data_3",
        "area": "data",
        "type": "single_choice",
        "text": "question.data_3.text",
        "options": YES_NO,
        "required": True,
        "flag_if": ["no"],
        "flag_text": "question.data_3.flag",
        "order": 3,
    },
    {
        "id": "data_4",
        "area": "data",
        "type": "single_choice",
        "text": "question.data_4.text",
        "options": MATURITY_LEVELS,
        "required": True,
        "flag_if": ["initial"],
        "order": 4,
    },
]

DEFAULT_USERS = [
    {
        "email": "coordinator@example.gov.ca",
        "name": "Main Coordinator",
        "role": "coordinator",
        "department": "Risk and Compliance Office",
        "title": "Risk Assessment Coordinator",
    },
    {
        "email": "procurement@example.gov.ca",
        "name": "Procurement Manager",
        "role": "contributor",
        "department": "Procurement",
        "title": "Senior Procurement Officer",
    },
    {
        "email": "security@example.gov.ca",
        "name": "Security Officer",
        "role": "contributor",
        "department": "Security",
        "title": "Chief Security Officer",
    },
    {
        "email": "finance@example.gov.ca",
        "name": "Finance Director",
        "role": "contributor",
        "department": "Finance",
        "title": "Director of Financial Management",
    },
    {
        "email": "reviewer@example.gov.ca",
        "name": "Senior Reviewer",
        "role": "reviewer",
        "department": "Executive Office",
        "title": "Deputy Director",
    },
]

# Document keys used by the storage layer.
ASSIGNMENTS_KEY = "rcpAssignments"
USERS_KEY = "rcpUsers"

# Directory for server-side JSON documents (assignments, users).
DATA_DIR = ".rcp_data"

# Results page colour bands: (upper bound exclusive, band)
MATURITY_BANDS = [(2, "danger"), (3, "warning"), (4, "info")]
COMPLIANCE_BANDS = [(60, "danger"), (80, "warning"), (90, "info")]
