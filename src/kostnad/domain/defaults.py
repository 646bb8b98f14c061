"""Default categories and merchant patterns seeded by ``init-categories``."""

# (name, description, icon)
DEFAULT_CATEGORIES = [
    ("Mat & Dagligvaror", "Mataffärer, livsmedel, hushållsartiklar", "🛒"),
    ("Restaurang & Café", "Utemat, fika, matleveranser", "🍽️"),
    ("Transport", "Bensin, parkering, kollektivtrafik, bil", "🚗"),
    ("Boende", "Hyra, el, vatten, försäkring, internet", "🏠"),
    ("Nöje & Fritid", "Bio, spel, streaming, hobbies", "🎬"),
    ("Shopping", "Kläder, elektronik, inredning, presenter", "🛍️"),
    ("Hälsa & Skönhet", "Apotek, läkare, träning, hygien", "❤️"),
    ("Resor", "Hotell, flyg, semester, utflykter", "✈️"),
    ("Barn & Familj", "Barnkläder, leksaker, förskola, aktiviteter", "👶"),
    ("Inkomst", "Lön, bidrag, återbetalningar, överföringar in", "💰"),
    ("Övrigt", "Okategoriserat, diverse utgifter", "📦"),
]

# Category name -> case-insensitive merchant substrings.
# Seeding order is mapping order, which decides ties between patterns.
DEFAULT_MERCHANT_PATTERNS = {
    "Mat & Dagligvaror": [
        "ICA", "COOP", "HEMKOP", "Systembolaget", "BARABRAMAT", "Gudagott",
        "BAGERIET", "WILLYS", "LIDL", "NETTO",
    ],
    "Restaurang & Café": [
        "Foodora", "PizzaTime", "BISTRO", "CUMPANE", "Coffee Lab", "da Matteo",
        "NOSTRANO", "TOUIS THAI", "TRANS SIBERIAN", "TOSSESTUGAN", "STORKEN",
        "Medelhavs", "Fiskverkstan", "ESPRESSO HOUSE", "MAX HAMBUR", "MCDONALDS",
    ],
    "Transport": [
        "Circle K", "OKQ8", "St1", "EasyPark", "PARKERING", "TRÄNGSELSKAT",
        "Transportstyre", "DACK I VAST", "PREEM", "VÄSTTRAFIK", "SJ AB",
    ],
    "Boende": ["GÖTEBORG ENERG", "ELEKTROTEKNISK", "HYRA", "TELIA", "COMHEM", "RIKSBYGGEN"],
    "Shopping": [
        "JYSK", "HEMTEX", "BAUHAUS", "Zettle_*Brandt", "The Beauty Fac", "Lillak",
        "W*gp.se", "LOOMISP", "EKBERGS", "IKEA", "ELGIGANTEN", "MEDIAMARKT",
    ],
    "Hälsa & Skönhet": ["APOTEK", "VÅRDCENTRAL", "TANDLÄK", "SATS"],
    "Resor": ["HOTEL", "STORHOGNA SPA", "KLOVSJO", "SAS"],
    "Barn & Familj": ["BABYSAM", "LEKIA", "BR LEK", "BARNKLÄD"],
    "Inkomst": ["Lön", "FÖRSÄKRINGSKASS", "SKATTEVERKET"],
    "Övrigt": ["Överf Mobil", "UBR*", "NMB*", "AKTIEBOLAGET"],
}
