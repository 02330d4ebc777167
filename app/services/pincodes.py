"""Static Ahmedabad pincode table used when the mapping provider is unavailable.

Boundaries are coarse outlines ([lat, lng] rings), good enough to highlight an
area on the territory map.
"""

PINCODES: dict[str, dict] = {
    "380001": {
        "name": "Ahmedabad GPO (Lal Darwaja)",
        "center": [23.0258, 72.5873],
        "coordinates": [
            [23.0335, 72.5790], [23.0340, 72.5955], [23.0250, 72.5990],
            [23.0170, 72.5940], [23.0180, 72.5800],
        ],
    },
    "380006": {
        "name": "Ellisbridge / Navrangpura",
        "center": [23.0300, 72.5600],
        "coordinates": [
            [23.0390, 72.5520], [23.0395, 72.5690], [23.0300, 72.5720],
            [23.0215, 72.5670], [23.0220, 72.5530],
        ],
    },
    "380007": {
        "name": "Paldi",
        "center": [23.0120, 72.5620],
        "coordinates": [
            [23.0205, 72.5545], [23.0210, 72.5700], [23.0120, 72.5735],
            [23.0040, 72.5690], [23.0045, 72.5550],
        ],
    },
    "380009": {
        "name": "Navrangpura",
        "center": [23.0370, 72.5560],
        "coordinates": [
            [23.0450, 72.5480], [23.0455, 72.5640], [23.0370, 72.5660],
            [23.0290, 72.5620], [23.0295, 72.5490],
        ],
    },
    "380013": {
        "name": "Naranpura",
        "center": [23.0570, 72.5550],
        "coordinates": [
            [23.0650, 72.5470], [23.0655, 72.5630], [23.0570, 72.5650],
            [23.0490, 72.5610], [23.0495, 72.5480],
        ],
    },
    "380015": {
        "name": "Satellite",
        "center": [23.0300, 72.5170],
        "coordinates": [
            [23.0400, 72.5060], [23.0410, 72.5270], [23.0300, 72.5300],
            [23.0200, 72.5250], [23.0205, 72.5080],
        ],
    },
    "380052": {
        "name": "Memnagar / Gurukul",
        "center": [23.0500, 72.5330],
        "coordinates": [
            [23.0580, 72.5250], [23.0585, 72.5410], [23.0500, 72.5430],
            [23.0420, 72.5390], [23.0425, 72.5260],
        ],
    },
    "380054": {
        "name": "Bodakdev / Thaltej",
        "center": [23.0450, 72.5070],
        "coordinates": [
            [23.0550, 72.4960], [23.0560, 72.5170], [23.0450, 72.5200],
            [23.0350, 72.5150], [23.0355, 72.4980],
        ],
    },
    "380058": {
        "name": "Bopal",
        "center": [23.0330, 72.4650],
        "coordinates": [
            [23.0440, 72.4530], [23.0450, 72.4760], [23.0330, 72.4790],
            [23.0220, 72.4740], [23.0225, 72.4560],
        ],
    },
    "380059": {
        "name": "Thaltej / Sola",
        "center": [23.0600, 72.5120],
        "coordinates": [
            [23.0700, 72.5010], [23.0710, 72.5220], [23.0600, 72.5250],
            [23.0500, 72.5200], [23.0505, 72.5030],
        ],
    },
}


def lookup(pincode: str) -> dict | None:
    return PINCODES.get((pincode or "").strip())
