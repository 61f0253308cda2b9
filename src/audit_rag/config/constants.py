"""Static lookup tables shared by extraction, recognition and retrieval."""

from __future__ import annotations

# Canonical enum sets
SEVERITIES = ("Critical", "High", "Medium", "Low")
STATUSES = ("Open", "In Progress", "Closed", "Deferred")
PROJECT_TYPES = (
    "Hotel",
    "Landed House",
    "Apartment",
    "School",
    "University",
    "Insurance",
    "Hospital",
    "Clinic",
    "Mall",
    "Office Building",
    "Mixed-Use Development",
)

MIN_YEAR = 2000
MAX_YEAR = 2099

# Alias tables: surface string -> canonical value
PROJECT_TYPE_ALIASES: dict[str, str] = {
    "hotel": "Hotel",
    "hotels": "Hotel",
    "hotel apartment": "Apartment",
    "condotel": "Apartment",
    "apartment": "Apartment",
    "apartments": "Apartment",
    "flat": "Apartment",
    "flats": "Apartment",
    "hospital": "Hospital",
    "hospitals": "Hospital",
    "clinic": "Clinic",
    "clinics": "Clinic",
    "school": "School",
    "schools": "School",
    "university": "University",
    "universities": "University",
    "college": "University",
    "mall": "Mall",
    "malls": "Mall",
    "shopping center": "Mall",
    "shopping centre": "Mall",
    "office": "Office Building",
    "office building": "Office Building",
    "landed house": "Landed House",
    "house": "Landed House",
    "houses": "Landed House",
    "insurance": "Insurance",
    "mixed-use": "Mixed-Use Development",
    "mixed use": "Mixed-Use Development",
}

SEVERITY_ALIASES: dict[str, str] = {
    "critical": "Critical",
    "urgent": "Critical",
    "severe": "Critical",
    "high": "High",
    "important": "High",
    "medium": "Medium",
    "moderate": "Medium",
    "low": "Low",
    "minor": "Low",
}

STATUS_ALIASES: dict[str, str] = {
    "open": "Open",
    "pending": "Open",
    "new": "Open",
    "in progress": "In Progress",
    "ongoing": "In Progress",
    "working": "In Progress",
    "closed": "Closed",
    "resolved": "Closed",
    "done": "Closed",
    "completed": "Closed",
    "deferred": "Deferred",
    "postponed": "Deferred",
    "delayed": "Deferred",
}

# Fallback recognizer keeps its own, smaller synonym maps. Values must stay
# inside SEVERITIES / STATUSES.
FALLBACK_SEVERITY_MAP: dict[str, str] = {
    "critical": "Critical",
    "urgent": "Critical",
    "severe": "Critical",
    "highest risk": "Critical",
    "high": "High",
    "important": "High",
    "medium": "Medium",
    "moderate": "Medium",
    "low": "Low",
    "minor": "Low",
}

FALLBACK_STATUS_MAP: dict[str, str] = {
    "open": "Open",
    "pending": "Open",
    "new": "Open",
    "in progress": "In Progress",
    "ongoing": "In Progress",
    "closed": "Closed",
    "resolved": "Closed",
    "completed": "Closed",
    "deferred": "Deferred",
}

DEPARTMENTS = (
    "IT",
    "HR",
    "Finance",
    "Sales",
    "Procurement",
    "Legal",
    "Marketing",
    "Operations",
    "Accounting",
    "Admin",
    "Administration",
    "Engineering",
    "R&D",
    "Research",
    "Development",
    "Customer Service",
    "Support",
    "Logistics",
    "Supply Chain",
    "Quality",
    "QA",
    "QC",
    "Production",
    "Manufacturing",
    "Warehouse",
    "Security",
    "Facilities",
    "Maintenance",
    "Compliance",
    "Audit",
    "Risk",
    "Treasury",
    "Tax",
    "Payroll",
    "Benefits",
    "Training",
    "Recruitment",
    "Communications",
)

# Department codes that are also common lower-case words
CASE_SENSITIVE_DEPARTMENTS = frozenset({"IT", "QA", "QC"})

KEYWORD_STOPWORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "can", "her",
        "was", "one", "our", "out", "day", "get", "has", "him", "his", "how",
        "man", "new", "now", "old", "see", "two", "way", "who", "boy", "did",
        "its", "let", "put", "say", "she", "too", "use", "show", "list", "find",
        "from", "with", "that", "this", "have", "what", "when", "where", "which",
        "about", "there", "their", "would", "could", "should", "findings", "finding",
    }
)

# Fallback recognizer word lists
FALLBACK_COMMON_WORDS = frozenset(
    {
        "show", "me", "find", "get", "list", "display", "about", "in", "for",
        "the", "a", "an", "and", "or", "of", "findings",
    }
)
FALLBACK_FILTER_WORDS = frozenset(
    {"critical", "high", "medium", "low", "open", "closed", "pending", "resolved"}
)

# Words that mark a query as needing LLM analysis
ANALYSIS_KEYWORDS = (
    "recommend",
    "suggest",
    "analyze",
    "analyse",
    "compare",
    "pattern",
    "trend",
    "predict",
    "why",
    "how should",
    "what should",
    "insight",
    "summary",
    "summarize",
    "explain",
)

# Words that push strategy selection towards semantic retrieval
ANALYTICAL_KEYWORDS = (
    "why",
    "how",
    "analyze",
    "compare",
    "trend",
    "pattern",
    "recommend",
    "suggest",
    "explain",
    "understand",
    "insight",
    "relationship",
    "correlation",
    "impact",
    "cause",
    "effect",
)

# Indonesian real-estate acronyms -> keyword expansions
DOMAIN_TERMS: dict[str, list[str]] = {
    # Legal documents
    "ppjb": ["PPJB", "Perjanjian Pengikatan Jual Beli", "binding sale agreement", "purchase agreement"],
    "ajb": ["AJB", "Akta Jual Beli", "sale deed", "purchase deed", "final deed"],
    "shm": ["SHM", "Sertifikat Hak Milik", "freehold certificate", "ownership certificate"],
    "shgb": ["SHGB", "Sertifikat Hak Guna Bangunan", "building rights certificate", "leasehold"],
    "shmsrs": ["SHMSRS", "Strata Title Certificate", "apartment ownership", "condo title"],
    # Permits
    "imb": ["IMB", "Izin Mendirikan Bangunan", "building permit", "construction permit"],
    "pbg": ["PBG", "Persetujuan Bangunan Gedung", "building approval", "construction approval"],
    "slf": ["SLF", "Sertifikat Laik Fungsi", "functional certificate", "occupancy permit", "building certificate"],
    # Taxes
    "pbb": ["PBB", "Pajak Bumi dan Bangunan", "land tax", "building tax", "property tax"],
    "bphtb": ["BPHTB", "Bea Perolehan Hak", "acquisition duty", "transfer tax", "land transfer tax"],
    "ppn": ["PPN", "Pajak Pertambahan Nilai", "value added tax", "VAT", "sales tax"],
    "pph": ["PPh", "Pajak Penghasilan", "income tax"],
    # Financial
    "kpr": ["KPR", "Kredit Pemilikan Rumah", "mortgage", "home loan", "housing credit"],
    "dp": ["DP", "Down Payment", "Uang Muka", "initial payment", "deposit"],
    "utj": ["UTJ", "Uang Tanda Jadi", "earnest money", "booking deposit"],
    "ipl": ["IPL", "Iuran Pengelolaan Lingkungan", "service charge", "maintenance fee", "management fee"],
    "ukt": ["UKT", "Uang Kuliah Tunggal", "single tuition", "consolidated fee"],
    "spp": ["SPP", "Sumbangan Pembinaan Pendidikan", "tuition fee", "school fee"],
    # Property types
    "kavling": ["kavling", "plot", "lot", "land plot"],
    "cluster": ["cluster", "gated community", "housing cluster"],
    "indent": ["indent", "pre-order", "pre-sale", "booking"],
    "condotel": ["condotel", "condo-hotel", "hotel apartment"],
    "soho": ["SOHO", "Small Office Home Office", "live-work unit"],
    # Hospital
    "igd": ["IGD", "Instalasi Gawat Darurat", "emergency department", "emergency room", "ER"],
    "icu": ["ICU", "Intensive Care Unit", "critical care"],
    "nicu": ["NICU", "Neonatal Intensive Care", "newborn intensive care"],
    "bpjs": ["BPJS", "BPJS Kesehatan", "national health insurance", "government insurance"],
    "bor": ["BOR", "Bed Occupancy Rate", "occupancy rate", "bed utilization"],
    # Hotel
    "adr": ["ADR", "Average Daily Rate", "average room rate"],
    "revpar": ["RevPAR", "Revenue Per Available Room", "revenue efficiency"],
    "gop": ["GOP", "Gross Operating Profit", "operating profit"],
    "mice": ["MICE", "Meetings Incentives Conferences Events", "business events"],
    # Education
    "paud": ["PAUD", "Early Childhood Education", "pre-school"],
    "tk": ["TK", "Taman Kanak-Kanak", "kindergarten"],
    "sd": ["SD", "Sekolah Dasar", "elementary school", "primary school"],
    "smp": ["SMP", "Sekolah Menengah Pertama", "junior high school"],
    "sma": ["SMA", "Sekolah Menengah Atas", "senior high school"],
    "smk": ["SMK", "Sekolah Menengah Kejuruan", "vocational school"],
    "sks": ["SKS", "Satuan Kredit Semester", "credit hours", "course credits"],
    "ipk": ["IPK", "Indeks Prestasi Kumulatif", "GPA", "grade point average"],
    # Land rights
    "hgb": ["HGB", "Hak Guna Bangunan", "right to build", "building rights"],
    "hgu": ["HGU", "Hak Guna Usaha", "right to cultivate", "cultivation rights"],
    # Area ratios
    "kdb": ["KDB", "Koefisien Dasar Bangunan", "building coverage ratio", "BCR"],
    "klb": ["KLB", "Koefisien Lantai Bangunan", "floor area ratio", "FAR"],
    "kdh": ["KDH", "Koefisien Dasar Hijau", "green area ratio", "green space"],
}

# Severity label thresholds on nilai, checked top-down
SEVERITY_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (16, "Critical"),
    (11, "High"),
    (6, "Medium"),
)

# Keyword relevance weights (raw scale 0-100)
RELEVANCE_WEIGHT_YEAR = 30.0
RELEVANCE_WEIGHT_DEPARTMENT = 25.0
RELEVANCE_WEIGHT_KEYWORDS = 25.0

# Presentation glyphs
SEVERITY_GLYPHS: dict[str, str] = {
    "Critical": "🔴",
    "High": "🟠",
    "Medium": "🟡",
    "Low": "🟢",
}
STATUS_GLYPHS: dict[str, str] = {
    "Open": "📂",
    "In Progress": "⏳",
    "Closed": "✅",
    "Deferred": "⏸️",
}
NEUTRAL_GLYPH = "⚪"
