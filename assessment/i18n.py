"""
Bilingual (English/French) text for the assessment.

All user-facing text lives in one table keyed by stable ids (`area.*`,
`question.*`, `option.*`, `flag.*` and UI keys) and is resolved through
`translate`. Catalog data only ever carries keys.
"""

import enum
import logging
import re
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Language(str, enum.Enum):
    EN = "en"
    FR = "fr"


TRANSLATIONS: Dict[str, Dict[str, str]] = {
    # Application
    "app.title": {"en": "GC-RCP Lite", "fr": "GC-RCP Lite"},
    "app.subtitle": {
        "en": "Risk & Compliance Self-Assessment Portal",
        "fr": "Portail d'auto-évaluation des risques et de la conformité",
    },
    "language.switch": {"en": "Français", "fr": "English"},
    "tab.department": {"en": "Department", "fr": "Ministère"},
    "tab.risk": {"en": "Risk Assessment", "fr": "Évaluation des risques"},
    "tab.controls": {"en": "Controls Assessment", "fr": "Évaluation des contrôles"},
    "tab.results": {"en": "Results", "fr": "Résultats"},
    # Department information
    "department.name": {"en": "Department name", "fr": "Nom du ministère"},
    "department.acronym": {"en": "Acronym", "fr": "Acronyme"},
    "department.fiscal_year": {"en": "Fiscal year", "fr": "Exercice financier"},
    "department.saved": {
        "en": "Department information saved on this device.",
        "fr": "Renseignements sur le ministère enregistrés sur cet appareil.",
    },
    # Question flow
    "assessment.area": {"en": "Assessment area", "fr": "Domaine d'évaluation"},
    "assessment.progress": {"en": "Progress", "fr": "Progression"},
    "assessment.flags": {"en": "Flags", "fr": "Signalements"},
    "assessment.no_questions": {
        "en": "No questions are available for this area yet.",
        "fr": "Aucune question n'est encore disponible pour ce domaine.",
    },
    "assessment.unsupported_type": {
        "en": "Unsupported question type: {{type}}",
        "fr": "Type de question non pris en charge : {{type}}",
    },
    "assessment.assigned_to": {
        "en": "Assigned to {{assignee}} ({{status}})",
        "fr": "Attribué à {{assignee}} ({{status}})",
    },
    "assessment.required": {"en": "Required", "fr": "Obligatoire"},
    "form.select_at_least": {
        "en": "Select at least {{count}} option(s).",
        "fr": "Sélectionnez au moins {{count}} option(s).",
    },
    "form.max_length": {
        "en": "Maximum {{count}} characters.",
        "fr": "Maximum de {{count}} caractères.",
    },
    # Controls placeholder
    "controls.placeholder": {
        "en": "The controls assessment will be available in a future release.",
        "fr": "L'évaluation des contrôles sera offerte dans une version future.",
    },
    # Assignment status
    "status.not_started": {"en": "not started", "fr": "non commencé"},
    "status.in_progress": {"en": "in progress", "fr": "en cours"},
    "status.completed": {"en": "completed", "fr": "terminé"},
    "status.reviewed": {"en": "reviewed", "fr": "examiné"},
    "assignment.title": {"en": "Assignments", "fr": "Attributions"},
    "assignment.assignee": {"en": "Assignee", "fr": "Responsable"},
    "assignment.assign": {"en": "Assign area", "fr": "Attribuer le domaine"},
    "assignment.reviewer": {"en": "Reviewer", "fr": "Réviseur"},
    "assignment.review": {"en": "Mark reviewed", "fr": "Marquer comme examiné"},
    "assignment.none": {"en": "No assignments yet.", "fr": "Aucune attribution."},
    # Results
    "results.overall_maturity": {"en": "Overall maturity", "fr": "Maturité globale"},
    "results.overall_compliance": {
        "en": "Overall compliance",
        "fr": "Conformité globale",
    },
    "results.total_flags": {"en": "Total flags", "fr": "Nombre de signalements"},
    "results.area": {"en": "Area", "fr": "Domaine"},
    "results.maturity": {"en": "Maturity (1-5)", "fr": "Maturité (1-5)"},
    "results.compliance": {"en": "Compliance (%)", "fr": "Conformité (%)"},
    "results.answered": {"en": "Answered", "fr": "Réponses"},
    "results.no_data": {"en": "No data", "fr": "Aucune donnée"},
    "results.flags_title": {"en": "Compliance flags", "fr": "Signalements de conformité"},
    "results.no_flags": {"en": "No flags raised.", "fr": "Aucun signalement."},
    "export.csv": {"en": "Download CSV", "fr": "Télécharger CSV"},
    "export.pptx": {"en": "Download PPTX", "fr": "Télécharger PPTX"},
    "export.pdf": {"en": "Download PDF", "fr": "Télécharger PDF"},
    "export.title": {
        "en": "Risk & Compliance Self-Assessment",
        "fr": "Auto-évaluation des risques et de la conformité",
    },
    "export.summary": {"en": "Summary", "fr": "Sommaire"},
    "export.area_scores": {"en": "Area scores", "fr": "Résultats par domaine"},
    # Flags
    "flag.default": {
        "en": "Question {{question}} requires attention",
        "fr": "La question {{question}} nécessite une attention particulière",
    },
    # Areas
    "area.procurement.title": {"en": "Procurement", "fr": "Approvisionnement"},
    "area.procurement.description": {
        "en": "Assessment of procurement processes and controls",
        "fr": "Évaluation des processus et des contrôles d'approvisionnement",
    },
    "area.real_property.title": {"en": "Real Property", "fr": "Biens immobiliers"},
    "area.real_property.description": {
        "en": "Assessment of real property management",
        "fr": "Évaluation de la gestion des biens immobiliers",
    },
    "area.financial_management.title": {
        "en": "Financial and Expenditure Management",
        "fr": "Gestion financière et des dépenses",
    },
    "area.financial_management.description": {
        "en": "Assessment of financial controls and expenditure management",
        "fr": "Évaluation des contrôles financiers et de la gestion des dépenses",
    },
    "area.grants_contributions.title": {
        "en": "Grants and Contributions",
        "fr": "Subventions et contributions",
    },
    "area.grants_contributions.description": {
        "en": "Assessment of grants and contributions programs",
        "fr": "Évaluation des programmes de subventions et de contributions",
    },
    "area.values_ethics.title": {"en": "Values and Ethics", "fr": "Valeurs et éthique"},
    "area.values_ethics.description": {
        "en": "Assessment of values and ethics framework",
        "fr": "Évaluation du cadre des valeurs et de l'éthique",
    },
    "area.workplace_health.title": {
        "en": "Workplace Health",
        "fr": "Santé en milieu de travail",
    },
    "area.workplace_health.description": {
        "en": "Assessment of workplace health and safety",
        "fr": "Évaluation de la santé et de la sécurité au travail",
    },
    "area.performance_management.title": {
        "en": "Performance Management",
        "fr": "Gestion du rendement",
    },
    "area.performance_management.description": {
        "en": "Assessment of performance management practices",
        "fr": "Évaluation des pratiques de gestion du rendement",
    },
    "area.security.title": {"en": "Security", "fr": "Sécurité"},
    "area.security.description": {
        "en": "Assessment of security controls and practices",
        "fr": "Évaluation des contrôles et des pratiques de sécurité",
    },
    "area.service.title": {"en": "Service", "fr": "Service"},
    "area.service.description": {
        "en": "Assessment of service delivery",
        "fr": "Évaluation de la prestation des services",
    },
    "area.technology.title": {"en": "Technology", "fr": "Technologie"},
    "area.technology.description": {
        "en": "Assessment of technology management",
        "fr": "Évaluation de la gestion de la technologie",
    },
    "area.data.title": {"en": "Data", "fr": "Données"},
    "area.data.description": {
        "en": "Assessment of data management practices",
        "fr": "Évaluation des pratiques de gestion des données",
    },
    # Shared options
    "option.yes": {"en": "Yes", "fr": "Oui"},
    "option.no": {"en": "No", "fr": "Non"},
    "option.maturity.initial": {"en": "Initial (Level 1)", "fr": "Initial (Niveau 1)"},
    "option.maturity.repeatable": {
        "en": "Repeatable (Level 2)",
        "fr": "Reproductible (Niveau 2)",
    },
    "option.maturity.defined": {"en": "Defined (Level 3)", "fr": "Défini (Niveau 3)"},
    "option.maturity.managed": {"en": "Managed (Level 4)", "fr": "Géré (Niveau 4)"},
    "option.maturity.optimizing": {
        "en": "Optimizing (Level 5)",
        "fr": "Optimisé (Niveau 5)",
    },
    "option.frequency.monthly": {
        "en": "Monthly or more frequently",
        "fr": "Mensuellement ou plus souvent",
    },
    "option.frequency.quarterly": {"en": "Quarterly", "fr": "Trimestriellement"},
    "option.frequency.semi_annually": {"en": "Semi-annually", "fr": "Semestriellement"},
    "option.frequency.annually": {"en": "Annually", "fr": "Annuellement"},
    "option.frequency.less_than_annually": {
        "en": "Less than annually",
        "fr": "Moins d'une fois par année",
    },
    "option.frequency.never": {"en": "Never", "fr": "Jamais"},
    "option.process.comprehensive": {
        "en": "Yes, a comprehensive process is in place",
        "fr": "Oui, un processus complet est en place",
    },
    "option.process.partial": {
        "en": "Yes, but it is not consistently applied",
        "fr": "Oui, mais il n'est pas appliqué de façon uniforme",
    },
    "option.process.planned": {
        "en": "No, but there are plans to implement one",
        "fr": "Non, mais sa mise en œuvre est prévue",
    },
    "option.process.none": {"en": "No, nothing is in place", "fr": "Non, rien n'est en place"},
    "option.capacity.within_1y": {
        "en": "Yes, within the last year",
        "fr": "Oui, au cours de la dernière année",
    },
    "option.capacity.within_2y": {
        "en": "Yes, within the last two years",
        "fr": "Oui, au cours des deux dernières années",
    },
    "option.capacity.within_3y": {
        "en": "Yes, within the last three years",
        "fr": "Oui, au cours des trois dernières années",
    },
    "option.capacity.planned": {
        "en": "No, but planning to conduct one",
        "fr": "Non, mais une évaluation est prévue",
    },
    "option.capacity.none": {"en": "No assessment conducted", "fr": "Aucune évaluation effectuée"},
    "option.condition.improved_significantly": {
        "en": "Improved significantly",
        "fr": "Nettement amélioré",
    },
    "option.condition.improved_slightly": {
        "en": "Improved slightly",
        "fr": "Légèrement amélioré",
    },
    "option.condition.stable": {"en": "Remained stable", "fr": "Demeuré stable"},
    "option.condition.deteriorated_slightly": {
        "en": "Deteriorated slightly",
        "fr": "Légèrement détérioré",
    },
    "option.condition.deteriorated_significantly": {
        "en": "Deteriorated significantly",
        "fr": "Nettement détérioré",
    },
    "option.condition.not_applicable": {
        "en": "Not applicable - no real property managed",
        "fr": "Sans objet - aucun bien immobilier géré",
    },
    "option.documentation.all": {"en": "All transactions (100%)", "fr": "Toutes les transactions (100 %)"},
    "option.documentation.most": {
        "en": "Most transactions (75-99%)",
        "fr": "La plupart des transactions (75-99 %)",
    },
    "option.documentation.some": {
        "en": "Some transactions (50-74%)",
        "fr": "Certaines transactions (50-74 %)",
    },
    "option.documentation.few": {
        "en": "Few transactions (25-49%)",
        "fr": "Peu de transactions (25-49 %)",
    },
    "option.documentation.very_few": {
        "en": "Very few transactions (1-24%)",
        "fr": "Très peu de transactions (1-24 %)",
    },
    "option.documentation.none": {"en": "No transactions (0%)", "fr": "Aucune transaction (0 %)"},
    "option.documentation.not_applicable": {
        "en": "Not applicable - no transactions last fiscal year",
        "fr": "Sans objet - aucune transaction au dernier exercice",
    },
    "option.controls.mfa": {
        "en": "Multi-factor authentication",
        "fr": "Authentification à plusieurs facteurs",
    },
    "option.controls.encryption": {
        "en": "Data encryption (at rest and in transit)",
        "fr": "Chiffrement des données (au repos et en transit)",
    },
    "option.controls.logging": {
        "en": "Security event logging and monitoring",
        "fr": "Journalisation et surveillance des événements de sécurité",
    },
    "option.controls.patches": {
        "en": "Regular security patching",
        "fr": "Application régulière des correctifs de sécurité",
    },
    "option.controls.backups": {
        "en": "Regular data backups and recovery testing",
        "fr": "Sauvegardes régulières des données et tests de récupération",
    },
    "option.controls.none": {
        "en": "None of the above",
        "fr": "Aucun de ces contrôles",
    },
    # Procurement questions
    "question.proc_1.text": {
        "en": "How frequently does the Deputy Head meet with the Senior Designated Official for Procurement to discuss procurement matters?",
        "fr": "À quelle fréquence l'administrateur général rencontre-t-il le cadre supérieur désigné pour l'approvisionnement afin de discuter des questions d'approvisionnement?",
    },
    "question.proc_1.guidance": {
        "en": "Select the option that best represents the frequency of these meetings over the past fiscal year.",
        "fr": "Sélectionnez l'option qui représente le mieux la fréquence de ces réunions au cours du dernier exercice.",
    },
    "question.proc_1.flag": {
        "en": "Infrequent oversight of procurement by the Deputy Head",
        "fr": "Surveillance peu fréquente de l'approvisionnement par l'administrateur général",
    },
    "question.proc_2.text": {
        "en": "Does the organization have a process to identify long-term contracts at least two years before their expiration?",
        "fr": "L'organisation dispose-t-elle d'un processus pour repérer les contrats à long terme au moins deux ans avant leur échéance?",
    },
    "question.proc_2.flag": {
        "en": "No process to track expiring long-term contracts",
        "fr": "Aucun processus de suivi des contrats à long terme arrivant à échéance",
    },
    "question.proc_3.text": {
        "en": "Does the organization have risk-based internal controls over procurement reviewed within the past year?",
        "fr": "L'organisation dispose-t-elle de contrôles internes de l'approvisionnement fondés sur les risques et examinés au cours de la dernière année?",
    },
    "question.proc_3.flag": {
        "en": "Procurement internal controls missing or not reviewed",
        "fr": "Contrôles internes de l'approvisionnement absents ou non examinés",
    },
    "question.proc_4.text": {
        "en": "Has the organization conducted a procurement capacity assessment within the last three years?",
        "fr": "L'organisation a-t-elle effectué une évaluation de sa capacité d'approvisionnement au cours des trois dernières années?",
    },
    "question.proc_4.flag": {
        "en": "No recent procurement capacity assessment",
        "fr": "Aucune évaluation récente de la capacité d'approvisionnement",
    },
    "question.proc_4a.text": {
        "en": "Describe the constraints that have prevented a capacity assessment.",
        "fr": "Décrivez les contraintes qui ont empêché une évaluation de la capacité.",
    },
    "question.proc_5.text": {
        "en": "What is the level of maturity of the organization's Procurement Management Framework?",
        "fr": "Quel est le niveau de maturité du cadre de gestion de l'approvisionnement de l'organisation?",
    },
    "question.proc_5.guidance": {
        "en": "Assess based on documentation, integration, and effectiveness of the framework.",
        "fr": "Évaluez en fonction de la documentation, de l'intégration et de l'efficacité du cadre.",
    },
    "question.proc_5.flag": {
        "en": "Procurement management framework is ad hoc",
        "fr": "Le cadre de gestion de l'approvisionnement est ponctuel",
    },
    "question.proc_6.text": {
        "en": "What is the level of maturity of the organization's procurement monitoring and control practices?",
        "fr": "Quel est le niveau de maturité des pratiques de surveillance et de contrôle de l'approvisionnement de l'organisation?",
    },
    # Real property questions
    "question.rp_1.text": {
        "en": "How frequently does the Deputy Head meet with the Senior Designated Official for Real Property?",
        "fr": "À quelle fréquence l'administrateur général rencontre-t-il le cadre supérieur désigné pour les biens immobiliers?",
    },
    "question.rp_1.flag": {
        "en": "Infrequent oversight of real property",
        "fr": "Surveillance peu fréquente des biens immobiliers",
    },
    "question.rp_2.text": {
        "en": "How has the condition of the organization's real property portfolio changed over the last three fiscal years?",
        "fr": "Comment l'état du portefeuille de biens immobiliers de l'organisation a-t-il évolué au cours des trois derniers exercices?",
    },
    "question.rp_2.flag": {
        "en": "Real property portfolio condition is deteriorating",
        "fr": "L'état du portefeuille de biens immobiliers se détériore",
    },
    "question.rp_3.text": {
        "en": "What proportion of last fiscal year's real property transactions have complete compliance documentation?",
        "fr": "Quelle proportion des transactions immobilières du dernier exercice est accompagnée d'une documentation de conformité complète?",
    },
    "question.rp_3.flag": {
        "en": "Incomplete documentation for real property transactions",
        "fr": "Documentation incomplète pour les transactions immobilières",
    },
    "question.rp_4.text": {
        "en": "What is the level of maturity of the organization's real property governance?",
        "fr": "Quel est le niveau de maturité de la gouvernance des biens immobiliers de l'organisation?",
    },
    "question.rp_4.flag": {
        "en": "Real property governance is ad hoc",
        "fr": "La gouvernance des biens immobiliers est ponctuelle",
    },
    # Security questions
    "question.sec_1.text": {
        "en": "How frequently do security officials report to governance committees on the performance of security controls?",
        "fr": "À quelle fréquence les responsables de la sécurité rendent-ils compte aux comités de gouvernance du rendement des contrôles de sécurité?",
    },
    "question.sec_1.flag": {
        "en": "Infrequent reporting on security control performance",
        "fr": "Rapports peu fréquents sur le rendement des contrôles de sécurité",
    },
    "question.sec_2.text": {
        "en": "Has your department completed a threat and risk assessment within the last 12 months?",
        "fr": "Votre ministère a-t-il effectué une évaluation des menaces et des risques au cours des 12 derniers mois?",
    },
    "question.sec_2.flag": {
        "en": "No recent threat and risk assessment",
        "fr": "Pas d'évaluation récente des menaces et des risques",
    },
    "question.sec_2a.text": {
        "en": "When is the next threat and risk assessment planned?",
        "fr": "Quand la prochaine évaluation des menaces et des risques est-elle prévue?",
    },
    "question.sec_3.text": {
        "en": "Which of the following security controls does your department have in place?",
        "fr": "Lesquels des contrôles de sécurité suivants votre ministère a-t-il mis en place?",
    },
    "question.sec_3.flag": {
        "en": "Key security controls are not in place",
        "fr": "Les principaux contrôles de sécurité ne sont pas en place",
    },
    "question.sec_3a.text": {
        "en": "Explain why none of the listed security controls are in place.",
        "fr": "Expliquez pourquoi aucun des contrôles de sécurité énumérés n'est en place.",
    },
    "question.sec_4.text": {
        "en": "How would you rate the maturity of your department's security incident response processes?",
        "fr": "Comment évalueriez-vous la maturité des processus de réponse aux incidents de sécurité de votre ministère?",
    },
    "question.sec_4.flag": {
        "en": "Low maturity for security incident response",
        "fr": "Faible maturité pour la réponse aux incidents de sécurité",
    },
    # Technology questions
    "question.tech_1.text": {
        "en": "Does your department have a documented IT governance framework?",
        "fr": "Votre ministère dispose-t-il d'un cadre de gouvernance informatique documenté?",
    },
    "question.tech_1.guidance": {
        "en": "A governance framework defines the roles, responsibilities, and decision-making processes for IT management.",
        "fr": "Un cadre de gouvernance définit les rôles, les responsabilités et les processus de prise de décision pour la gestion des TI.",
    },
    "question.tech_1.flag": {
        "en": "Missing IT governance framework documentation",
        "fr": "Documentation du cadre de gouvernance informatique manquante",
    },
    "question.tech_2.text": {
        "en": "How would you rate the maturity of your department's IT governance processes?",
        "fr": "Comment évalueriez-vous la maturité des processus de gouvernance informatique de votre ministère?",
    },
    "question.tech_2.flag": {
        "en": "Low maturity rating for IT governance processes",
        "fr": "Faible notation de maturité pour les processus de gouvernance informatique",
    },
    "question.tech_3.text": {
        "en": "Please describe how IT governance decisions are documented and communicated within your department.",
        "fr": "Veuillez décrire comment les décisions de gouvernance informatique sont documentées et communiquées au sein de votre ministère.",
    },
    # Data questions
    "question.data_1.text": {
        "en": "Does your department have a documented data governance framework?",
        "fr": "Votre ministère dispose-t-il d'un cadre de gouvernance des données documenté?",
    },
    "question.data_1.flag": {
        "en": "Missing data governance framework",
        "fr": "Cadre de gouvernance des données manquant",
    },
    "question.data_2.text": {
        "en": "How frequently are data quality assessments performed?",
        "fr": "À quelle fréquence les évaluations de la qualité des données sont-elles effectuées?",
    },
    "question.data_2.flag": {
        "en": "Infrequent data quality assessments",
        "fr": "Évaluations peu fréquentes de la qualité des données",
    },
    "question.data_3.text": {
        "en": "Has your department conducted a Privacy Impact Assessment for systems containing personal information?",
        "fr": "Votre ministère a-t-il mené une évaluation des facteurs relatifs à la vie privée pour les systèmes contenant des renseignements personnels?",
    },
    "question.data_3.flag": {
        "en": "Missing Privacy Impact Assessment",
        "fr": "Évaluation des facteurs relatifs à la vie privée manquante",
    },
    "question.data_4.text": {
        "en": "What is the level of maturity of your department's data management practices?",
        "fr": "Quel est le niveau de maturité des pratiques de gestion des données de votre ministère?",
    },
}

_PLACEHOLDER = re.compile(r"{{(\w+)}}")


def translate(
    key: str, language="en", placeholders: Optional[Dict[str, str]] = None
) -> str:
    """
    Resolve a translation key for a language.

    Missing keys never raise: a warning is logged and the key itself is
    returned so the gap stays visible on screen.

    :param key: dotted translation key, e.g. "area.security.title"
    :param language: Language or its code ("en"/"fr")
    :param placeholders: values substituted for {{name}} markers
    :return: the translated string
    """
    entry = TRANSLATIONS.get(key)
    if entry is None:
        logger.warning("Translation key not found: %s", key)
        return key

    code = Language(language).value
    text = entry.get(code)
    if text is None:
        logger.warning("Translation key %s has no %s text", key, code)
        return key
    if placeholders:
        text = _PLACEHOLDER.sub(
            lambda m: str(placeholders.get(m.group(1), m.group(0))), text
        )
    return text


def toggle_language(language) -> Language:
    return Language.FR if Language(language) is Language.EN else Language.EN


def area_title(area: str, language="en") -> str:
    return translate(f"area.{area}.title", language)
