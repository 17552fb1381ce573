"""Built-in game mode datasets.

Each row is (canonical name, map id, alternate names). Country ids are
ISO 3166-1 alpha-3 codes, region ids are INSEE region codes, matching the
properties used by the map layer to highlight the entity.
"""

EUROPEAN_COUNTRIES = [
    # Western Europe
    ("Allemagne", "DEU", []),
    ("France", "FRA", []),
    ("Royaume-Uni", "GBR", ["angleterre", "grande-bretagne"]),
    ("Pays-Bas", "NLD", ["hollande"]),
    ("Belgique", "BEL", []),
    ("Irlande", "IRL", []),
    ("Luxembourg", "LUX", []),
    ("Monaco", "MCO", []),
    ("Andorre", "AND", []),
    ("Liechtenstein", "LIE", []),
    # Northern Europe
    ("Suède", "SWE", []),
    ("Norvège", "NOR", []),
    ("Finlande", "FIN", []),
    ("Danemark", "DNK", []),
    ("Islande", "ISL", []),
    ("Lituanie", "LTU", []),
    ("Lettonie", "LVA", []),
    ("Estonie", "EST", []),
    # Eastern Europe
    ("Pologne", "POL", []),
    ("Ukraine", "UKR", []),
    ("Biélorussie", "BLR", []),
    ("Tchéquie", "CZE", ["république tchèque"]),
    ("Slovaquie", "SVK", []),
    ("Hongrie", "HUN", []),
    ("Roumanie", "ROU", []),
    ("Bulgarie", "BGR", []),
    ("Moldavie", "MDA", []),
    # Southern Europe
    ("Italie", "ITA", []),
    ("Espagne", "ESP", []),
    ("Portugal", "PRT", []),
    ("Grèce", "GRC", []),
    ("Croatie", "HRV", []),
    ("Slovénie", "SVN", []),
    ("Bosnie-Herzégovine", "BIH", ["bosnie"]),
    ("Serbie", "SRB", []),
    ("Albanie", "ALB", []),
    ("Kosovo", "XKX", []),
    ("Monténégro", "MNE", []),
    ("Macédoine du Nord", "MKD", ["macédoine"]),
    ("Chypre", "CYP", []),
    ("Malte", "MLT", []),
    ("Saint-Marin", "SMR", []),
    ("Vatican", "VAT", []),
    ("Suisse", "CHE", []),
    ("Autriche", "AUT", []),
]

FRENCH_REGIONS = [
    ("Auvergne-Rhône-Alpes", "84", ["Rhône-Alpes"]),
    ("Bourgogne-Franche-Comté", "27", []),
    ("Bretagne", "53", []),
    ("Centre-Val de Loire", "24", ["Centre", "Val de Loire"]),
    ("Corse", "94", ["Corsica"]),
    ("Grand Est", "44", ["Alsace-Champagne-Ardenne-Lorraine"]),
    ("Hauts-de-France", "32", ["Nord-Pas-de-Calais-Picardie"]),
    ("Île-de-France", "11", ["IDF", "Paris"]),
    ("Normandie", "28", ["Basse-Normandie", "Haute-Normandie"]),
    ("Nouvelle-Aquitaine", "75", ["Aquitaine-Limousin-Poitou-Charentes"]),
    ("Occitanie", "76", ["Languedoc-Roussillon-Midi-Pyrénées", "Midi-Pyrénées"]),
    ("Pays de la Loire", "52", []),
    ("Provence-Alpes-Côte d'Azur", "93", ["PACA", "Provence"]),
    ("Guadeloupe", "01", []),
    ("Martinique", "02", []),
    ("Guyane", "03", ["Guyane française"]),
    ("La Réunion", "04", ["Réunion"]),
    ("Mayotte", "06", []),
]

GAME_MODES = {
    'europe': {
        'label': "Pays d'Europe",
        'unit_label': 'pays',
        'id_property': 'ISO_A3',
        'rows': EUROPEAN_COUNTRIES,
    },
    'franceRegions': {
        'label': 'Régions de France',
        'unit_label': 'régions',
        'id_property': 'code',
        'rows': FRENCH_REGIONS,
    },
}
