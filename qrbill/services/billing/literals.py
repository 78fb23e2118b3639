"""
Localized text literals for the QR-bill (Annex C of the implementation guidelines).

English is the source language: an English or unknown language tag, or a
literal missing from a table, yields the literal unchanged.
"""

TEXT_LITERALS = {
    "de": {
        "Payment part": "Zahlteil",
        "Receipt": "Empfangsschein",
        "Account / Payable to": "Konto / Zahlbar an",
        "Reference": "Referenz",
        "Additional information": "Zusätzliche Informationen",
        "Payable by": "Zahlbar durch",
        "Payable by (name/address)": "Zahlbar durch (Name/Adresse)",
        "Currency": "Währung",
        "Amount": "Betrag",
        "Acceptance point": "Annahmestelle",
        "In favour of": "Zugunsten",
        "DO NOT USE FOR PAYMENT": "NICHT ZUR ZAHLUNG VERWENDEN",
    },
    "fr": {
        "Payment part": "Section paiement",
        "Receipt": "Récépissé",
        "Account / Payable to": "Compte / Payable à",
        "Reference": "Référence",
        "Additional information": "Informations supplémentaires",
        "Payable by": "Payable par",
        "Payable by (name/address)": "Payable par (nom/adresse)",
        "Currency": "Monnaie",
        "Amount": "Montant",
        "Acceptance point": "Point de dépôt",
        "In favour of": "En faveur de",
        "DO NOT USE FOR PAYMENT": "NE PAS UTILISER POUR LE PAIEMENT",
    },
    "it": {
        "Payment part": "Sezione pagamento",
        "Receipt": "Ricevuta",
        "Account / Payable to": "Conto / Pagabile a",
        "Reference": "Riferimento",
        "Additional information": "Informazioni supplementari",
        "Payable by": "Pagabile da",
        "Payable by (name/address)": "Pagabile da (nome/indirizzo)",
        "Currency": "Valuta",
        "Amount": "Importo",
        "Acceptance point": "Punto di accettazione",
        "In favour of": "A favore di",
        "DO NOT USE FOR PAYMENT": "NON UTILIZZARE PER IL PAGAMENTO",
    },
}


def localize(lang, literal: str) -> str:
    """Return ``literal`` translated into ``lang``, or ``literal`` itself."""
    return TEXT_LITERALS.get(str(lang or "").lower(), {}).get(literal, literal)
