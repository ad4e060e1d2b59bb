"""
╔══════════════════════════════════════════════════════════════════════════════╗
║  Visitas CRM - Exportación CSV / JSON                                        ║
║                                                                              ║
║  FORMATO CSV (8 columnas EXACTAS, en este orden):                            ║
║  Fecha, Encargado, Dirección, Empresa, Rubro, Vendido, Contacto, Contactado  ║
║                                                                              ║
║  - Una línea por visita, separador "\n"                                      ║
║  - Campos con coma, comillas o salto de línea van entre comillas             ║
║  - La descarga lleva BOM UTF-8 para que Excel respete los acentos            ║
╚══════════════════════════════════════════════════════════════════════════════╝
"""

import csv
import io
import json
import re
from datetime import date
from typing import Dict, List, Optional

CSV_HEADERS = [
    "Fecha",
    "Encargado",
    "Dirección",
    "Empresa",
    "Rubro",
    "Vendido",
    "Contacto",
    "Contactado",
]

# Orden de los campos de la visita para cada columna
CSV_FIELDS = [
    "date",
    "inCharge",
    "address",
    "company",
    "industry",
    "sold",
    "contactInfo",
    "contacted",
]

UTF8_BOM = "\ufeff"

CURRENT_CYCLE_LABEL = "Actual"


def convert_to_csv(records: List[Dict]) -> str:
    """Contenido CSV sin BOM: encabezado + una línea por visita."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in records:
        writer.writerow([r.get(field, "") or "" for field in CSV_FIELDS])
    return output.getvalue().rstrip("\n")


def with_bom(content: str) -> str:
    return UTF8_BOM + content


def convert_to_json(records: List[Dict]) -> str:
    """Backup: el arreglo de visitas tal cual, indentado."""
    return json.dumps(records, indent=2, ensure_ascii=False)


def _cycle_slug(cycle_name: Optional[str]) -> str:
    return re.sub(r"\s+", "_", cycle_name or CURRENT_CYCLE_LABEL)


def csv_filename(cycle_name: Optional[str] = None, today: date = None) -> str:
    today = today or date.today()
    return f"Reporte_Ventas_{_cycle_slug(cycle_name)}_{today.isoformat()}.csv"


def json_filename(cycle_name: Optional[str] = None) -> str:
    return f"Backup_Sling_{_cycle_slug(cycle_name)}.json"
