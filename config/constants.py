"""
Centralized constants for the ABNT document builder.
All magic numbers and fixed labels live here.
"""

# ===========================================
# PAGE GEOMETRY (A4, ABNT margins)
# ===========================================
A4_WIDTH_CM = 21.0
A4_HEIGHT_CM = 29.7
MARGIN_TOP_CM = 3.0
MARGIN_RIGHT_CM = 2.0
MARGIN_BOTTOM_CM = 2.0
MARGIN_LEFT_CM = 3.0

POINTS_PER_CM = 72 / 2.54

# ===========================================
# HEIGHT HEURISTIC (points)
# Calibration values, not font metrics.
# ===========================================
BODY_CHARS_PER_LINE = 80              # 12pt body text across 16cm
QUOTE_CHARS_PER_LINE = 55             # 11pt, 4cm left indent
FOOTNOTE_CHARS_PER_LINE = 110         # 10pt
BLOCK_GAP_PT = 12                     # space between consecutive blocks
SECTION_HEADING_PT = 36               # RESUMO / REFERÊNCIAS / SUMÁRIO headings
TABLE_ROW_PT = 26                     # one table row incl. cell padding
LIST_ITEM_GAP_PT = 6
REFERENCE_GAP_PT = 8
IMAGE_ASPECT_RATIO = 0.75             # assumed height / width
IMAGE_CAPTION_PT = 16
DEFAULT_IMAGE_WIDTH_PERCENT = 100

# ===========================================
# PLACEHOLDERS & LABELS (pt-BR)
# ===========================================
PLACEHOLDERS = {
    "title": "Título sem texto",
    "paragraph": "Parágrafo vazio",
    "quote": "Citação vazia",
    "abstract": "Resumo vazio",
    "image_alt": "Imagem do documento",
    "list_item": "Item {n}",
    "reference": "Referência {n}",
    "table_header": "Coluna {n}",
    "empty_document": "Seu documento aparecerá aqui",
    "empty_document_hint": "Comece adicionando elementos pela barra lateral",
}

LABELS = {
    "abstract": "RESUMO",
    "references": "REFERÊNCIAS",
    "toc": "SUMÁRIO",
    "keywords": "Palavras-chave:",
}

# ===========================================
# EXPORT
# ===========================================
EXPORT_BASENAME = "documento-abnt"
IMAGE_FETCH_TIMEOUT_SECONDS = 15.0

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOGGER_NAME = 'abnt'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
