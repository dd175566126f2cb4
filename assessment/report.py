"""
Charts and downloadable reports (PPTX, PDF) built from a results payload
(see `assessment.scoring.results_payload`).
"""

import io
from xml.sax.saxutils import escape

import pandas as pd
import plotly.graph_objects as go
import plotly.io as pio
from pptx import Presentation
from pptx.util import Inches
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Image as RLImage
from reportlab.platypus import (ListFlowable, ListItem, Paragraph,
                                SimpleDocTemplate, Spacer, Table, TableStyle)

from assessment.i18n import translate

# for chart sizes
BAR_H = 360
RADAR_H = 360


def _base_fig_layout(fig, height=360):
    """
    Apply a consistent layout to a figure: transparent background, fixed
    height, light grid.
    """
    grid_color = "#CBD5E1"
    fig.update_layout(
        autosize=False,
        height=height,
        margin=dict(l=30, r=30, t=40, b=30),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color="#0b1020"),
        xaxis=dict(showgrid=False, zeroline=False, fixedrange=True),
        yaxis=dict(showgrid=True, gridcolor=grid_color, zeroline=False, fixedrange=True),
        uirevision="keep",
    )
    return fig


# shown for an answered area whose answers carry no maturity weight
NO_SCORE = "-"


def _scored(area_rows, key="has_data"):
    return [r for r in area_rows if r.get(key)]


def maturity_figure(area_rows, language="en"):
    """
    Bar chart of area maturity (1-5), areas without weighted answers left out.

    Args:
        area_rows (list): `areas` records of a results payload
        language (str): label language

    Returns:
        go.Figure: bar figure
    """
    rows = _scored(area_rows, "has_maturity")
    fig = go.Figure(
        go.Bar(
            x=[r["area"] for r in rows],
            y=[float(r["maturity"]) for r in rows],
            name=translate("results.maturity", language),
            marker_color="#26374a",
        )
    )
    fig.update_layout(
        title=translate("results.maturity", language),
        yaxis=dict(range=[0, 5], dtick=1),
    )
    return _base_fig_layout(fig, height=BAR_H)


def compliance_figure(area_rows, language="en"):
    """Bar chart of area compliance (0-100 %), areas without answers left out."""
    rows = _scored(area_rows)
    fig = go.Figure(
        go.Bar(
            x=[r["area"] for r in rows],
            y=[float(r["compliance"]) for r in rows],
            name=translate("results.compliance", language),
            marker_color="#2b8000",
        )
    )
    fig.update_layout(
        title=translate("results.compliance", language),
        yaxis=dict(range=[0, 100], dtick=20),
    )
    return _base_fig_layout(fig, height=BAR_H)


def radar_figure(area_rows, language="en"):
    """Maturity radar across scored areas; empty when fewer than three areas have data."""
    rows = _scored(area_rows, "has_maturity")
    fig = go.Figure()
    if len(rows) >= 3:
        cats = [r["area"] for r in rows]
        vals = [float(r["maturity"]) for r in rows]
        fig.add_trace(
            go.Scatterpolar(
                r=vals + vals[:1],
                theta=cats + cats[:1],
                fill="toself",
                name=translate("results.maturity", language),
            )
        )
    fig.update_layout(
        polar=dict(radialaxis=dict(range=[0, 5], autorange=False, dtick=1)),
    )
    return _base_fig_layout(fig, height=RADAR_H)


def _fmt_score(row, field, digits):
    if not row.get("has_data"):
        return None
    if field == "maturity" and not row.get("has_maturity"):
        return NO_SCORE
    return f"{float(row[field]):.{digits}f}"


def _area_table_rows(data, language):
    no_data = translate("results.no_data", language)
    header = [
        translate("results.area", language),
        translate("results.maturity", language),
        translate("results.compliance", language),
        translate("results.answered", language),
    ]
    body = [
        [
            r["area"],
            _fmt_score(r, "maturity", 1) or no_data,
            _fmt_score(r, "compliance", 0) or no_data,
            f"{r['answered']}/{r['questions']}",
        ]
        for r in data.get("areas", [])
    ]
    return [header] + body


def _summary_lines(data, language):
    s = data.get("summary", {})
    return [
        f"{translate('results.overall_maturity', language)}: {s.get('overall_maturity', 0):.1f} / 5",
        f"{translate('results.overall_compliance', language)}: {s.get('overall_compliance', 0)}%",
        f"{translate('results.total_flags', language)}: {s.get('total_flags', 0)}",
    ]


def _flag_lines(data):
    return [f"[{area}] {msg}" for area, msgs in data.get("flags", {}).items() for msg in msgs]


def write_ppt_bytes(buf, data, department=None):
    """
    Write a PowerPoint deck to `buf`:

    1. Title slide with department information.
    2. Summary slide with overall maturity, compliance and flag count.
    3. Area scores table.
    4. Compliance flags.
    """
    language = data.get("language", "en")
    department = department or {}

    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[0])
    slide.shapes.title.text = translate("export.title", language)
    slide.placeholders[1].text = (
        f"{translate('department.name', language)}: {department.get('name', '')}\n"
        f"{translate('department.acronym', language)}: {department.get('acronym', '')}\n"
        f"{translate('department.fiscal_year', language)}: {department.get('fiscal_year', '')}"
    )

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = translate("export.summary", language)
    body = slide.shapes.placeholders[1].text_frame
    body.clear()
    lines = _summary_lines(data, language)
    body.paragraphs[0].text = lines[0]
    for line in lines[1:]:
        body.add_paragraph().text = line

    slide = prs.slides.add_slide(prs.slide_layouts[5])
    slide.shapes.title.text = translate("export.area_scores", language)
    tbl_rows = _area_table_rows(data, language)
    rows, cols = len(tbl_rows), len(tbl_rows[0])
    table = slide.shapes.add_table(
        rows, cols, Inches(0.5), Inches(1.4), Inches(9.0), Inches(0.4 + 0.3 * rows)
    ).table
    for i, row in enumerate(tbl_rows):
        for j, val in enumerate(row):
            table.cell(i, j).text = str(val)

    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = translate("results.flags_title", language)
    tf = slide.placeholders[1].text_frame
    tf.clear()
    flags = _flag_lines(data) or [translate("results.no_flags", language)]
    tf.paragraphs[0].text = flags[0]
    for line in flags[1:]:
        tf.add_paragraph().text = line
    prs.save(buf)


def _img_from_fig(fig, width=720, height=420, scale=2):
    # Requires kaleido installed
    png_bytes = pio.to_image(fig, format="png", width=width, height=height, scale=scale)
    return io.BytesIO(png_bytes)


def write_pdf_bytes(buf, data, department=None, include_charts=True):
    """
    Write a PDF report to `buf`.

    Args:
        buf (BytesIO): target buffer
        data (dict): results payload
        department (dict, optional): name/acronym/fiscal_year
        include_charts (bool): embed chart images; needs kaleido
    """
    language = data.get("language", "en")
    department = department or {}
    doc = SimpleDocTemplate(
        buf, pagesize=A4, leftMargin=16, rightMargin=16, topMargin=16, bottomMargin=16
    )
    styles = getSampleStyleSheet()
    story = [
        Paragraph(f"<b>{escape(translate('export.title', language))}</b>", styles["Title"]),
        Spacer(1, 8),
        Paragraph(
            f"{translate('department.name', language)}: {escape(str(department.get('name', '')))}&nbsp;&nbsp;&nbsp; "
            f"{translate('department.acronym', language)}: {escape(str(department.get('acronym', '')))}&nbsp;&nbsp;&nbsp; "
            f"{translate('department.fiscal_year', language)}: {escape(str(department.get('fiscal_year', '')))}",
            styles["Normal"],
        ),
        Spacer(1, 10),
    ]
    for line in _summary_lines(data, language):
        story.append(Paragraph(f"<b>{escape(line)}</b>", styles["Heading3"]))
    story.append(Spacer(1, 8))

    avail = A4[0] - 72
    tbl = Table(
        _area_table_rows(data, language),
        colWidths=[200] + [(avail - 200) / 3] * 3,
        hAlign="LEFT",
    )
    tbl.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e9ebf3")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#0b1020")),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ("TOPPADDING", (0, 0), (-1, 0), 6),
            ]
        )
    )
    story += [
        Paragraph(f"<b>{translate('export.area_scores', language)}</b>", styles["Heading3"]),
        Spacer(1, 6),
        tbl,
        Spacer(1, 12),
    ]

    if include_charts:
        rows = data.get("areas", [])
        for fig in (maturity_figure(rows, language), compliance_figure(rows, language)):
            img_buf = _img_from_fig(fig, width=520, height=320, scale=2)
            story += [RLImage(img_buf, width=520, height=320), Spacer(1, 12)]

    flags = _flag_lines(data)
    story += [
        Paragraph(f"<b>{translate('results.flags_title', language)}</b>", styles["Heading3"]),
        Spacer(1, 6),
    ]
    if flags:
        story.append(
            ListFlowable(
                [ListItem(Paragraph(escape(f), styles["Normal"])) for f in flags],
                bulletType="bullet",
            )
        )
    else:
        story.append(Paragraph(translate("results.no_flags", language), styles["Normal"]))

    doc.build(story)


def responses_csv(data) -> str:
    df = pd.DataFrame(data.get("responses", []))
    return df.to_csv(index=False)
