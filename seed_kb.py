# seed_kb.py - load knowledge base rows (error text, English answer, Hindi answer) from a CSV or Excel sheet
import csv
import io
import os
import zipfile

import click
import openpyxl
import requests
from flask import current_app
from flask.cli import with_appcontext

from config import db, logger
from knowledge import upsert_definition

FETCH_TIMEOUT = 30
EXCEL_SUFFIXES = (".xlsx", ".xlsm")


def _cell(row, i):
    if len(row) <= i or row[i] is None:
        return ""
    return str(row[i]).strip()


def parse_kb_rows(rows):
    """Yield (key_text, answer_en, answer_hi) for every usable data row.

    The first row is a header. Columns are positional, extra columns are ignored.
    """
    rows = iter(rows)
    next(rows, None)
    for row in rows:
        key_text, answer_en, answer_hi = _cell(row, 0), _cell(row, 1), _cell(row, 2)
        if not key_text:
            continue
        yield key_text, answer_en, answer_hi


def parse_kb_csv(text):
    return parse_kb_rows(csv.reader(io.StringIO(text)))


def parse_kb_xlsx(source):
    """Rows of the active sheet of a workbook (path or file object)."""
    wb = openpyxl.load_workbook(source, read_only=True, data_only=True)
    try:
        return list(parse_kb_rows(wb.active.iter_rows(values_only=True)))
    finally:
        wb.close()


def _is_excel(source):
    path = source.split("?", 1)[0].lower()
    return path.endswith(EXCEL_SUFFIXES)


def read_kb_rows(source):
    """Read KB rows from a local CSV/XLSX path or an http(s) URL."""
    if source.startswith(("http://", "https://")):
        r = requests.get(source, timeout=FETCH_TIMEOUT)
        r.raise_for_status()
        if _is_excel(source):
            return parse_kb_xlsx(io.BytesIO(r.content))
        # requests assumes ISO-8859-1 for text/* without a charset
        return list(parse_kb_csv(r.content.decode("utf-8-sig")))

    if not os.path.exists(source):
        raise FileNotFoundError(source)
    if _is_excel(source):
        return parse_kb_xlsx(source)
    with open(source, encoding="utf-8-sig", newline="") as f:
        return list(parse_kb_csv(f.read()))


def seed_knowledge_base(rows, service, meta=None):
    count = 0
    for key_text, answer_en, answer_hi in rows:
        upsert_definition(service, key_text, answer_en, answer_hi, meta=meta)
        count += 1
    db.session.commit()
    return count


@click.command("seed-kb")
@click.argument("source")
@click.option("--service", default=None, help="Service tag for the rows (defaults to DEFAULT_SERVICE).")
@with_appcontext
def seed_kb_command(source, service):
    """Seed the knowledge base from a CSV or XLSX file or URL (Que, Ans Eng, Ans Hin)."""
    service = service or current_app.config["DEFAULT_SERVICE"]
    click.echo(f"Reading knowledge base from: {source}")
    try:
        rows = read_kb_rows(source)
    except FileNotFoundError:
        raise click.ClickException(f"File not found: {source}")
    except (OSError, ValueError, requests.RequestException, csv.Error, zipfile.BadZipFile) as e:
        raise click.ClickException(f"Failed to read {source}: {e}")

    count = seed_knowledge_base(rows, service, meta={"source": os.path.basename(source)})
    logger.info("✅ Seeded %d entries for service %s", count, service)
    click.echo(f"Successfully seeded {count} entries into the Knowledge Base.")
