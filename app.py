# app.py

from functools import lru_cache

import dash
import dash_daq as daq
from dash import ALL, Input, Output, State, ctx, dcc, html

from assessment.assignments import (AssignmentError, AssignmentRepository,
                                    AssignmentTracker, UserRepository)
from assessment.i18n import area_title, translate
from assessment.models import (AssignmentStatus, QuestionType, UserRole,
                               as_value, raw_value)
from assessment.question_bank import default_bank
from assessment.report import (NO_SCORE, compliance_figure, maturity_figure,
                               radar_figure, responses_csv, write_pdf_bytes,
                               write_ppt_bytes)
from assessment.responses import ResponseCollector
from assessment.scoring import (area_progress, compliance_band, maturity_band,
                                results_payload)
from assessment.storage import JsonFileStore
from assessment.visibility import should_show
from config import DATA_DIR, FISCAL_YEARS

app = dash.Dash(__name__, suppress_callback_exceptions=True)
app.title = "GC-RCP Lite"
server = app.server

BANK = default_bank()
FIRST_AREA = next(a for a in BANK.areas if BANK.by_area(a))


@lru_cache(maxsize=1)
def get_tracker() -> AssignmentTracker:
    """
    Assignment tracker backed by JSON documents under DATA_DIR.

    Built on first use so that importing the app has no side effects on disk.
    """
    store = JsonFileStore(DATA_DIR)
    users = UserRepository(store)
    users.initialize_defaults()
    return AssignmentTracker(AssignmentRepository(store), users, BANK)


# ----------- Helpers -------------
def load_responses(records) -> ResponseCollector:
    return ResponseCollector.from_records(records or [], bank=BANK)


def merge_answers(records, ids, values):
    """
    Fold the current values of the question inputs into the stored responses.

    Blank inputs remove the stored answer; unchanged values keep their original
    timestamp.

    :param records: responses-store data (list of response records)
    :param ids: pattern-matching ids of the inputs, {"type": "q-input", "qid": ...}
    :param values: input values, same order as `ids`
    :return: (ResponseCollector, changed flag)
    """
    collector = load_responses(records)
    changed = False
    for cid, value in zip(ids or [], values or []):
        qid = cid["qid"]
        current = collector.get_response(qid)
        if value is None or value == "" or value == []:
            if current is not None:
                collector.remove_response(qid)
                changed = True
            continue
        if current is not None and current.value == as_value(value):
            continue
        collector.record_response(qid, value)
        changed = True
    return collector, changed


def area_options(language):
    counts = BANK.counts_by_area()
    return [
        {"label": f"{area_title(a, language)} ({counts[a]})", "value": a}
        for a in BANK.areas
    ]


def question_input(question, language, value=None):
    """
    Build the input control for a question.

    Unknown question types render a warning box instead of an input so one bad
    catalog entry never breaks the page.
    """
    qtype = question.question_type
    rid = {"type": "q-input", "qid": question.id}
    options = [
        {"label": translate(o.label, language), "value": o.value}
        for o in question.options
    ]

    if qtype is QuestionType.SINGLE_CHOICE:
        return dcc.RadioItems(id=rid, options=options, value=value, className="choices")
    if qtype is QuestionType.MULTI_CHOICE:
        children = [
            dcc.Checklist(id=rid, options=options, value=value or [], className="choices")
        ]
        if question.min_selections:
            children.append(
                html.Div(
                    translate(
                        "form.select_at_least",
                        language,
                        {"count": str(question.min_selections)},
                    ),
                    className="hint",
                )
            )
        return html.Div(children)
    if qtype in (QuestionType.FREE_TEXT, QuestionType.LONG_TEXT):
        if qtype is QuestionType.LONG_TEXT:
            control = dcc.Textarea(
                id=rid, value=value or "", maxLength=question.max_length, className="textarea"
            )
        else:
            control = dcc.Input(
                id=rid,
                value=value or "",
                maxLength=question.max_length,
                debounce=True,
                className="textin",
            )
        children = [control]
        if question.max_length:
            children.append(
                html.Div(
                    translate("form.max_length", language, {"count": str(question.max_length)}),
                    className="hint",
                )
            )
        return html.Div(children)

    return html.Div(
        translate("assessment.unsupported_type", language, {"type": question.type}),
        className="alert alert-warning",
    )


def question_row(question, number, language, responses):
    response = responses.get(question.id)
    value = raw_value(response.value) if response is not None else None

    header = [html.Span(f"{number}. "), translate(question.prompt, language)]
    if question.required:
        header.append(
            html.Span(
                " *", className="required", title=translate("assessment.required", language)
            )
        )
    children = [html.Div(header, className="qtext")]
    if question.guidance:
        children.append(html.Div(translate(question.guidance, language), className="guidance"))
    children.append(question_input(question, language, value))

    return html.Div(
        children,
        id={"type": "q-row", "qid": question.id},
        className="qrow",
        style=None if should_show(question, responses) else {"display": "none"},
    )


def kpi_cards(summary, language):
    return [
        html.Div(
            [
                html.Div(translate("results.overall_maturity", language), className="kpi-title"),
                html.Div(f"{float(summary['overall_maturity']):.1f} / 5", className="kpi-value"),
            ],
            className=f"kpi band-{maturity_band(summary['overall_maturity'])}",
        ),
        html.Div(
            [
                html.Div(translate("results.overall_compliance", language), className="kpi-title"),
                html.Div(f"{summary['overall_compliance']}%", className="kpi-value"),
            ],
            className=f"kpi band-{compliance_band(summary['overall_compliance'])}",
        ),
        html.Div(
            [
                html.Div(translate("results.total_flags", language), className="kpi-title"),
                html.Div(str(summary["total_flags"]), className="kpi-value"),
            ],
            className="kpi",
        ),
    ]


def area_table(area_rows, language):
    """Results table; areas without answers say so instead of showing 0."""
    no_data = translate("results.no_data", language)
    header = html.Tr(
        [
            html.Th(translate("results.area", language)),
            html.Th(translate("results.maturity", language)),
            html.Th(translate("results.compliance", language)),
            html.Th(translate("results.answered", language)),
        ]
    )
    body = []
    for r in area_rows:
        if r["has_data"]:
            if r["has_maturity"]:
                maturity = html.Td(
                    f"{float(r['maturity']):.1f}",
                    className=f"band-{maturity_band(r['maturity'])}",
                )
            else:
                maturity = html.Td(NO_SCORE)
            compliance = html.Td(
                f"{r['compliance']}%", className=f"band-{compliance_band(r['compliance'])}"
            )
        else:
            maturity, compliance = html.Td(no_data), html.Td(no_data)
        body.append(
            html.Tr(
                [html.Td(r["area"]), maturity, compliance, html.Td(f"{r['answered']}/{r['questions']}")]
            )
        )
    return html.Table([html.Thead(header), html.Tbody(body)], className="results-table")


def flag_items(flags, language):
    if not flags:
        return [html.Li(translate("results.no_flags", language))]
    return [html.Li(f"[{area}] {msg}") for area, msgs in flags.items() for msg in msgs]


# -------------- Layout --------------------
def _field(label_id, control):
    return html.Div([html.Label(id=label_id), control], className="field")


app.layout = html.Div(
    id="page-root",
    className="page",
    children=[
        dcc.Store(id="responses-store", storage_type="local"),
        dcc.Store(id="department-store", storage_type="local"),
        dcc.Store(id="language-store", data="en"),
        # Header
        html.Div(
            [
                html.H1(id="app-title"),
                html.P(id="app-subtitle"),
                daq.BooleanSwitch(
                    id="language-switch", on=False, label="Français", color="#26374a"
                ),
            ],
            className="header",
        ),
        dcc.Tabs(
            id="tabs",
            value="tab-department",
            children=[
                dcc.Tab(
                    id="tab-department",
                    value="tab-department",
                    children=[
                        html.Div(
                            [
                                _field(
                                    "dept-name-label",
                                    dcc.Input(
                                        id="dept-name",
                                        className="textin",
                                        persistence=True,
                                        persistence_type="local",
                                    ),
                                ),
                                _field(
                                    "dept-acronym-label",
                                    dcc.Input(
                                        id="dept-acronym",
                                        className="textin",
                                        persistence=True,
                                        persistence_type="local",
                                    ),
                                ),
                                _field(
                                    "dept-fiscal-year-label",
                                    dcc.Dropdown(
                                        id="dept-fiscal-year",
                                        options=FISCAL_YEARS,
                                        persistence=True,
                                        persistence_type="local",
                                    ),
                                ),
                                html.Div(id="dept-saved", className="hint"),
                            ],
                            className="panel",
                        ),
                        html.Div(
                            [
                                html.H3(id="assignment-title"),
                                html.Div(
                                    [
                                        dcc.Dropdown(id="assign-area", value=FIRST_AREA, clearable=False),
                                        dcc.Dropdown(id="assign-assignee"),
                                        dcc.Dropdown(id="assign-by"),
                                        html.Button(id="assign-btn", n_clicks=0, className="primary"),
                                    ],
                                    className="assign-row",
                                ),
                                html.Div(
                                    [
                                        dcc.Dropdown(id="review-assignment"),
                                        dcc.Dropdown(id="review-by"),
                                        html.Button(id="review-btn", n_clicks=0, className="secondary"),
                                    ],
                                    className="assign-row",
                                ),
                                html.Div(id="assignment-msg", className="alert"),
                                html.Ul(id="assignment-list"),
                            ],
                            className="panel",
                        ),
                    ],
                ),
                dcc.Tab(
                    id="tab-risk",
                    value="tab-risk",
                    children=[
                        _field(
                            "area-select-label",
                            dcc.Dropdown(id="area-select", value=FIRST_AREA, clearable=False),
                        ),
                        html.Div(id="area-assignments", className="hint"),
                        html.Div(
                            [
                                html.Div(id="progress-text"),
                                html.Div(
                                    html.Div(id="progress-bar", className="progress-fill"),
                                    className="progress-track",
                                ),
                            ],
                            className="progress",
                        ),
                        html.Div(id="question-container"),
                        html.Div(
                            [html.H3(id="flags-title"), html.Ul(id="area-flags")],
                            id="flags-alert",
                            className="alert alert-warning",
                        ),
                    ],
                ),
                dcc.Tab(
                    id="tab-controls",
                    value="tab-controls",
                    children=[html.P(id="controls-placeholder", className="panel")],
                ),
                dcc.Tab(
                    id="tab-results",
                    value="tab-results",
                    children=[
                        html.Div(id="kpis", className="kpis"),
                        html.Div(
                            [
                                html.Button(id="dl-csv", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-csv-out"),
                                html.Button(id="dl-ppt", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-ppt-out"),
                                html.Button(id="dl-pdf", n_clicks=0, className="secondary"),
                                dcc.Download(id="dl-pdf-out"),
                            ],
                            className="export-row",
                        ),
                        html.Div(id="area-table"),
                        html.Div(
                            [
                                dcc.Graph(id="maturity-bar", config={"displaylogo": False}),
                                dcc.Graph(id="compliance-bar", config={"displaylogo": False}),
                                dcc.Graph(id="maturity-radar", config={"displaylogo": False}),
                            ],
                            className="charts",
                        ),
                        html.H3(id="results-flags-title"),
                        html.Ul(id="results-flags", className="actions"),
                    ],
                ),
            ],
        ),
    ],
)


# -------- Callbacks ------------------
@app.callback(
    Output("language-store", "data"),
    Input("language-switch", "on"),
)
def set_language(is_on):
    return "fr" if is_on else "en"


# (component id, property, translation key) refreshed on every language change
STATIC_LABELS = [
    ("app-title", "children", "app.title"),
    ("app-subtitle", "children", "app.subtitle"),
    ("language-switch", "label", "language.switch"),
    ("tab-department", "label", "tab.department"),
    ("tab-risk", "label", "tab.risk"),
    ("tab-controls", "label", "tab.controls"),
    ("tab-results", "label", "tab.results"),
    ("dept-name-label", "children", "department.name"),
    ("dept-acronym-label", "children", "department.acronym"),
    ("dept-fiscal-year-label", "children", "department.fiscal_year"),
    ("area-select-label", "children", "assessment.area"),
    ("assignment-title", "children", "assignment.title"),
    ("assign-assignee", "placeholder", "assignment.assignee"),
    ("assign-btn", "children", "assignment.assign"),
    ("review-by", "placeholder", "assignment.reviewer"),
    ("review-btn", "children", "assignment.review"),
    ("controls-placeholder", "children", "controls.placeholder"),
    ("flags-title", "children", "assessment.flags"),
    ("results-flags-title", "children", "results.flags_title"),
    ("dl-csv", "children", "export.csv"),
    ("dl-ppt", "children", "export.pptx"),
    ("dl-pdf", "children", "export.pdf"),
]


@app.callback(
    [Output(cid, prop) for cid, prop, _ in STATIC_LABELS]
    + [Output("area-select", "options"), Output("assign-area", "options")],
    [Input("language-store", "data")],
)
def apply_language(language):
    """
    Refresh every static label when the language changes.

    Args:
        language (str): "en" or "fr", as stored in the "language-store".

    Returns:
        list: translated labels, then the area options of both area pickers.
    """
    language = language or "en"
    areas = area_options(language)
    return [translate(key, language) for _, _, key in STATIC_LABELS] + [areas, areas]


@app.callback(
    Output("department-store", "data"),
    Output("dept-saved", "children"),
    Input("dept-name", "value"),
    Input("dept-acronym", "value"),
    Input("dept-fiscal-year", "value"),
    State("language-store", "data"),
)
def save_department(name, acronym, fiscal_year, language):
    data = {"name": name or "", "acronym": acronym or "", "fiscal_year": fiscal_year or ""}
    saved = translate("department.saved", language or "en") if any(data.values()) else ""
    return data, saved


@app.callback(
    Output("question-container", "children"),
    Input("area-select", "value"),
    Input("language-store", "data"),
    State("responses-store", "data"),
)
def render_questions(area, language, records):
    """
    Render the question rows of one assessment area.

    Args:
        area (str): selected area id.
        language (str): current language.
        records (list): responses-store data, used for the initial input values.

    Returns:
        list: one row per question; hidden rows stay in the page so their
        inputs keep a stable identity for the pattern-matching callbacks.
    """
    language = language or "en"
    questions = BANK.by_area(area or FIRST_AREA)
    if not questions:
        return html.P(translate("assessment.no_questions", language))
    responses = load_responses(records)
    return [
        question_row(q, i, language, responses) for i, q in enumerate(questions, start=1)
    ]


@app.callback(
    Output("responses-store", "data"),
    Input({"type": "q-input", "qid": ALL}, "value"),
    State({"type": "q-input", "qid": ALL}, "id"),
    State("responses-store", "data"),
    prevent_initial_call=True,
)
def record_answers(values, ids, records):
    """
    Store the answers typed or selected on the current page, then let the
    assignment tracker advance any assignment whose scope is now started or
    complete.
    """
    collector, changed = merge_answers(records, ids, values)
    if not changed:
        raise dash.exceptions.PreventUpdate
    get_tracker().sync_all(collector)
    return collector.to_records()


@app.callback(
    Output({"type": "q-row", "qid": ALL}, "style"),
    Input("responses-store", "data"),
    Input("question-container", "children"),
    State({"type": "q-row", "qid": ALL}, "id"),
)
def toggle_conditional_rows(records, _, row_ids):
    responses = load_responses(records)
    styles = []
    for rid in row_ids:
        question = BANK.get(rid["qid"])
        visible = question is None or should_show(question, responses)
        styles.append(None if visible else {"display": "none"})
    return styles


@app.callback(
    Output("progress-text", "children"),
    Output("progress-bar", "style"),
    Output("area-flags", "children"),
    Output("flags-alert", "style"),
    Output("area-assignments", "children"),
    Input("responses-store", "data"),
    Input("area-select", "value"),
    Input("language-store", "data"),
)
def update_area_status(records, area, language):
    """
    Progress bar, live flags and assignment annotations for the selected area.

    Returns:
        tuple: progress text, progress bar style, flag items, alert style,
        assignment annotations.
    """
    language = language or "en"
    area = area or FIRST_AREA
    responses = load_responses(records)
    questions = BANK.by_area(area)

    progress = area_progress(area, questions, responses)
    payload = results_payload(BANK, responses, language)
    flags = payload["flags"].get(area_title(area, language), [])
    notes = get_tracker().describe_area(area, language)

    return (
        f"{translate('assessment.progress', language)}: {progress:.0f}%",
        {"width": f"{progress}%"},
        [html.Li(f) for f in flags],
        None if flags else {"display": "none"},
        [html.Div(n) for n in notes],
    )


@app.callback(
    Output("assignment-list", "children"),
    Output("assignment-msg", "children"),
    Output("assign-assignee", "options"),
    Output("assign-by", "options"),
    Output("review-assignment", "options"),
    Output("review-by", "options"),
    Input("assign-btn", "n_clicks"),
    Input("review-btn", "n_clicks"),
    Input("responses-store", "data"),
    Input("language-store", "data"),
    State("assign-area", "value"),
    State("assign-assignee", "value"),
    State("assign-by", "value"),
    State("review-assignment", "value"),
    State("review-by", "value"),
)
def manage_assignments(_a, _r, _records, language, area, assignee, assigned_by, review_id, reviewer):
    """
    Coordinator and reviewer actions, plus the current assignment list.

    Validation failures (unknown users, reviewing an unfinished assignment) are
    shown in the message area.
    """
    language = language or "en"
    tracker = get_tracker()
    message = ""
    try:
        if ctx.triggered_id == "assign-btn" and assignee and assigned_by:
            tracker.assign_area(area, assignee, assigned_by)
        elif ctx.triggered_id == "review-btn" and review_id and reviewer:
            tracker.review(review_id, reviewer)
    except AssignmentError as exc:
        message = str(exc)

    def user_opts(role):
        return [{"label": u.name, "value": u.email} for u in tracker.users.by_role(role)]

    assignments = tracker.assignments.all()
    items = [
        html.Li(
            f"{area_title(a.area, language)}: {a.assignee} "
            f"({translate(f'status.{a.status.value}', language)})"
        )
        for a in assignments
    ] or [html.Li(translate("assignment.none", language))]
    completed = [
        {"label": f"{area_title(a.area, language)} - {a.assignee}", "value": a.id}
        for a in assignments
        if a.status is AssignmentStatus.COMPLETED
    ]
    return (
        items,
        message,
        user_opts(UserRole.CONTRIBUTOR),
        user_opts(UserRole.COORDINATOR),
        completed,
        user_opts(UserRole.REVIEWER),
    )


@app.callback(
    Output("kpis", "children"),
    Output("area-table", "children"),
    Output("maturity-bar", "figure"),
    Output("compliance-bar", "figure"),
    Output("maturity-radar", "figure"),
    Output("results-flags", "children"),
    Input("responses-store", "data"),
    Input("language-store", "data"),
)
def update_results(records, language):
    """
    Updates the KPIs, area table, charts and flag list from the stored responses.

    Args:
        records (list): responses-store data.
        language (str): current language.

    Returns:
        tuple: KPI cards, area table, maturity bar, compliance bar, radar, flags.
    """
    language = language or "en"
    payload = results_payload(BANK, load_responses(records), language)
    rows = payload["areas"]
    return (
        kpi_cards(payload["summary"], language),
        area_table(rows, language),
        maturity_figure(rows, language),
        compliance_figure(rows, language),
        radar_figure(rows, language),
        flag_items(payload["flags"], language),
    )


# Exports
@app.callback(
    Output("dl-csv-out", "data"),
    Input("dl-csv", "n_clicks"),
    State("responses-store", "data"),
    State("language-store", "data"),
    prevent_initial_call=True,
)
def download_csv(_, records, language):
    """
    Download every question with its answer, flag and maturity as CSV.

    Returns:
        dict: dcc.send_string payload.
    """
    payload = results_payload(BANK, load_responses(records), language or "en")
    return dcc.send_string(responses_csv(payload), "rcp_assessment_responses.csv")


@app.callback(
    Output("dl-ppt-out", "data"),
    Input("dl-ppt", "n_clicks"),
    State("responses-store", "data"),
    State("department-store", "data"),
    State("language-store", "data"),
    prevent_initial_call=True,
)
def download_ppt(_, records, department, language):
    payload = results_payload(BANK, load_responses(records), language or "en")
    return dcc.send_bytes(
        lambda b: write_ppt_bytes(b, payload, department), "RCP_Assessment.pptx"
    )


@app.callback(
    Output("dl-pdf-out", "data"),
    Input("dl-pdf", "n_clicks"),
    State("responses-store", "data"),
    State("department-store", "data"),
    State("language-store", "data"),
    prevent_initial_call=True,
)
def download_pdf(_, records, department, language):
    payload = results_payload(BANK, load_responses(records), language or "en")
    return dcc.send_bytes(
        lambda b: write_pdf_bytes(b, payload, department), "RCP_Assessment.pdf"
    )


# ---------- Main -------------------
if __name__ == "__main__":
    app.run(debug=False)
