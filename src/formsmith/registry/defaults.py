"""Built-in GST document types."""

GSTIN_PATTERN = r"\d{2}[A-Z]{5}\d{4}[A-Z]{1}[A-Z\d]{1}[Z]{1}[A-Z\d]{1}"
PAN_PATTERN = r"[A-Z]{5}\d{4}[A-Z]{1}"

BUILTIN_DOCUMENT_TYPES: dict[str, dict] = {
    "DRC-13": {
        "name": "FORM GST DRC-13",
        "description": "Notice to third person under Section 79(1)(c)",
        "template": "DRC-13-Template.docx",
        "fields": {
            "BANK_NAME": {"type": "text", "label": "Bank Name", "required": True, "group": "bank"},
            "BANK_ADDRESS_LINE1": {
                "type": "text",
                "label": "Bank Address Line 1",
                "required": True,
                "group": "bank",
            },
            "BANK_ADDRESS_LINE2": {
                "type": "text",
                "label": "Bank Address Line 2",
                "group": "bank",
            },
            "GSTIN": {
                "type": "text",
                "label": "GSTIN Number",
                "required": True,
                "pattern": GSTIN_PATTERN,
                "placeholder": "e.g., 07AABCU9603R1ZM",
                "group": "taxpayer",
            },
            "TRADE_NAME": {"type": "text", "label": "Trade Name", "required": True, "group": "taxpayer"},
            "LEGAL_NAME": {"type": "text", "label": "Legal Name", "required": True, "group": "taxpayer"},
            "TAXPAYER_ADDRESS_LINE1": {
                "type": "text",
                "label": "Taxpayer Address Line 1",
                "required": True,
                "group": "taxpayer",
            },
            "TAXPAYER_ADDRESS_LINE2": {
                "type": "text",
                "label": "Taxpayer Address Line 2",
                "group": "taxpayer",
            },
            "ACCOUNT_NO": {"type": "text", "label": "Account Number", "required": True, "group": "bank"},
            "PAN_NO": {
                "type": "text",
                "label": "PAN Number",
                "required": True,
                "pattern": PAN_PATTERN,
                "placeholder": "e.g., ABCDE1234F",
                "group": "taxpayer",
            },
            "OIO_NO": {"type": "text", "label": "OIO Number", "required": True, "group": "case"},
            "OIO_DATE": {"type": "date", "label": "OIO Date", "required": True, "group": "case"},
            "TAX": {"type": "currency", "label": "Tax Amount (₹)", "required": True, "min": 0, "group": "amount"},
            "PENALTY": {
                "type": "currency",
                "label": "Penalty Amount (₹)",
                "required": True,
                "min": 0,
                "group": "amount",
            },
            "INTEREST": {
                "type": "currency",
                "label": "Interest Amount (₹)",
                "required": True,
                "min": 0,
                "group": "amount",
            },
            "TOTAL": {
                "type": "currency",
                "label": "Total Amount (₹)",
                "required": True,
                "min": 0,
                "sum_of": ["TAX", "PENALTY", "INTEREST"],
                "group": "amount",
            },
        },
        "field_groups": {
            "bank": {"name": "Bank Details", "order": 1},
            "taxpayer": {"name": "Taxpayer Details", "order": 2},
            "case": {"name": "Case Details", "order": 3},
            "amount": {"name": "Amount Details", "order": 4},
        },
    },
    "OIO": {
        "name": "Order-in-Original (OIO)",
        "description": "Adjudication order under GST",
        "template": "OIO-Template.docx",
        "fields": {
            "CASE_NO": {"type": "text", "label": "Case Number", "required": True, "group": "case"},
            "GSTIN": {
                "type": "text",
                "label": "GSTIN Number",
                "required": True,
                "pattern": GSTIN_PATTERN,
                "group": "taxpayer",
            },
            "TRADE_NAME": {"type": "text", "label": "Trade Name", "required": True, "group": "taxpayer"},
            "LEGAL_NAME": {"type": "text", "label": "Legal Name", "required": True, "group": "taxpayer"},
            "HEARING_DATE": {"type": "date", "label": "Hearing Date", "required": True, "group": "case"},
            "ORDER_DATE": {"type": "date", "label": "Order Date", "required": True, "group": "case"},
            "ISSUING_OFFICER": {
                "type": "text",
                "label": "Issuing Officer Name",
                "required": True,
                "group": "officer",
            },
            "DESIGNATION": {"type": "text", "label": "Designation", "required": True, "group": "officer"},
        },
        "field_groups": {
            "case": {"name": "Case Details", "order": 1},
            "taxpayer": {"name": "Taxpayer Details", "order": 2},
            "officer": {"name": "Officer Details", "order": 3},
        },
    },
}
