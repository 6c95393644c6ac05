"""Project-wide constants."""

RISK_LEVELS = {
    "severe": {"rank": 3, "color": "#ef4444", "label": "SEVERE"},
    "high": {"rank": 2, "color": "#f97316", "label": "HIGH"},
    "medium": {"rank": 1, "color": "#eab308", "label": "MEDIUM"},
    "low": {"rank": 0, "color": "#22c55e", "label": "LOW"},
}

# Reservoir fill (%) and inflow (cusecs) thresholds for the risk classifier
FILL_THRESHOLDS = {"severe": 90.0, "high": 75.0, "medium": 50.0}
INFLOW_THRESHOLDS = {"high": 10000.0, "medium": 5000.0, "low": 1000.0}

# Forecast probability -> per-day risk level
PROBABILITY_THRESHOLDS = {"severe": 70.0, "high": 50.0, "medium": 30.0}

# name: (cap, weight)
FACTOR_CAPS = {
    "rainfall": (40.0, 0.35),
    "reservoir": (35.0, 0.30),
    "ground_saturation": (25.0, 0.15),
    "historical_pattern": (20.0, 0.15),
    "seasonal_terrain": (15.0, 0.05),
}

FALLBACK_RESERVOIR_FACTOR = 30.0
FALLBACK_RAINFALL_FACTOR = 40.0
FALLBACK_AVERAGE_RAINFALL_MM = 50.0
FALLBACK_HISTORICAL_POINTS = 8.0

PROBABILITY_MIN = 5.0
PROBABILITY_MAX = 95.0
CONFIDENCE_START = 95.0
CONFIDENCE_DECAY_PER_DAY = 6.0
CONFIDENCE_FLOOR = 25.0
SPARSE_HISTORY_RECORDS = 10
SPARSE_HISTORY_PENALTY = 10.0
MISSING_RESERVOIR_PENALTY = 5.0
EXPECTED_RAINFALL_MULTIPLIER = 1.3
RIVER_RISE_PER_PROBABILITY_M = 1.5
SUSTAINED_HIGH_PROBABILITY = 70.0
SUSTAINED_HIGH_MIN_DAYS = 3

# IMD 24h category bound for "heavy" rain, used to scale live rainfall to 0..100
HEAVY_RAIN_MM = 64.4

# Jan..Dec, monsoon-shaped
CANONICAL_MONSOON_CURVE = (15.0, 12.0, 18.0, 25.0, 55.0, 160.0, 290.0, 275.0, 180.0, 95.0, 40.0, 20.0)

SEASONAL_COEFFICIENTS = (0.4, 0.3, 0.6, 0.8, 1.0, 1.8, 2.2, 2.1, 1.9, 1.4, 1.2, 0.5)

# Terrain classes: (keywords, points before seasonal scaling)
TERRAIN_CLASSES = [
    (("mumbai", "chennai", "kolkata", "kochi", "bhubaneswar", "cuttack", "alappuzha", "delta", "coastal"), 12.0),
    (("himalaya", "ghat", "shimla", "dehradun", "haridwar", "roorkee", "srinagar"), 10.0),
    (("ganga", "yamuna", "brahmaputra", "godavari", "allahabad", "varanasi", "patna", "bihar", "guwahati"), 9.0),
    (("delhi", "pune", "ahmedabad", "surat"), 6.0),
]
DEFAULT_TERRAIN_POINTS = 5.0

FLOOD_PRONE_STATES = {
    "assam": 10.0,
    "bihar": 10.0,
    "kerala": 10.0,
    "odisha": 10.0,
    "west bengal": 10.0,
    "uttar pradesh": 10.0,
    "maharashtra": 7.0,
    "gujarat": 7.0,
    "andhra pradesh": 7.0,
    "karnataka": 7.0,
}
DEFAULT_PRONENESS_POINTS = 3.0

# (average monthly mm, bonus points), checked in order
HISTORICAL_RAINFALL_BONUS = [(300.0, 10.0), (200.0, 7.0), (100.0, 4.0)]

# city: (state, lat, lon, baseline risk)
REGION_CATALOG = {
    "mumbai": ("Maharashtra", 19.076, 72.8777, "severe"),
    "delhi": ("Delhi", 28.66, 77.2167, "high"),
    "bengaluru": ("Karnataka", 12.9719, 77.5937, "high"),
    "hyderabad": ("Telangana", 17.385, 78.4867, "high"),
    "ahmedabad": ("Gujarat", 23.03, 72.58, "high"),
    "chennai": ("Tamil Nadu", 13.0825, 80.275, "severe"),
    "kolkata": ("West Bengal", 22.5667, 88.3667, "severe"),
    "surat": ("Gujarat", 21.1667, 72.8333, "high"),
    "pune": ("Maharashtra", 18.5203, 73.8567, "high"),
    "jaipur": ("Rajasthan", 26.9167, 75.8167, "low"),
    "lucknow": ("Uttar Pradesh", 26.8467, 80.9462, "low"),
    "kanpur": ("Uttar Pradesh", 26.4667, 80.35, "low"),
    "nagpur": ("Maharashtra", 21.1497, 79.0806, "high"),
    "patna": ("Bihar", 25.61, 85.1417, "severe"),
    "indore": ("Madhya Pradesh", 22.7167, 75.8472, "low"),
    "kochi": ("Kerala", 9.9667, 76.2833, "severe"),
    "guwahati": ("Assam", 26.1833, 91.75, "severe"),
    "agra": ("Uttar Pradesh", 27.1767, 78.0078, "low"),
    "allahabad": ("Uttar Pradesh", 25.4358, 81.8463, "low"),
    "gorakhpur": ("Uttar Pradesh", 26.76, 83.3731, "low"),
    "bareilly": ("Uttar Pradesh", 28.367, 79.4304, "low"),
    "varanasi": ("Uttar Pradesh", 25.3176, 82.9739, "low"),
    "gaya": ("Bihar", 24.7978, 85.0098, "low"),
    "purnia": ("Bihar", 25.7877, 87.4764, "severe"),
    "motihari": ("Bihar", 26.6575, 84.9192, "severe"),
    "dibrugarh": ("Assam", 27.4883, 94.9048, "severe"),
    "jorhat": ("Assam", 26.7441, 94.2166, "severe"),
    "kokrajhar": ("Assam", 26.4069, 90.2743, "severe"),
    "bhubaneswar": ("Odisha", 20.2961, 85.8245, "high"),
    "cuttack": ("Odisha", 20.463, 85.8829, "high"),
    "balasore": ("Odisha", 21.4939, 86.94, "severe"),
    "vijayawada": ("Andhra Pradesh", 16.5062, 80.648, "high"),
    "rajahmundry": ("Andhra Pradesh", 16.9918, 81.7766, "high"),
    "guntur": ("Andhra Pradesh", 16.3, 80.45, "high"),
    "thiruvananthapuram": ("Kerala", 8.5241, 76.9366, "high"),
    "thrissur": ("Kerala", 10.5276, 76.2144, "high"),
    "kottayam": ("Kerala", 9.5916, 76.5222, "high"),
    "nashik": ("Maharashtra", 20.0, 73.78, "high"),
    "kolhapur": ("Maharashtra", 16.705, 74.2433, "high"),
    "vadodara": ("Gujarat", 22.3072, 73.1812, "high"),
    "rajkot": ("Gujarat", 22.2958, 70.7984, "high"),
    "amritsar": ("Punjab", 31.634, 74.8723, "medium"),
    "ludhiana": ("Punjab", 30.901, 75.8573, "medium"),
    "jalandhar": ("Punjab", 31.326, 75.5762, "medium"),
    "roorkee": ("Uttarakhand", 29.87, 77.89, "medium"),
    "haridwar": ("Uttarakhand", 29.9457, 78.1642, "medium"),
    "shimla": ("Himachal Pradesh", 31.1048, 77.1734, "low"),
    "bihar sharif": ("Bihar", 25.2, 85.5, "medium"),
    "bhagalpur": ("Bihar", 25.2427, 86.9859, "medium"),
    "silchar": ("Assam", 24.8219, 92.7769, "severe"),
    "muzaffarpur": ("Bihar", 26.1226, 85.3916, "severe"),
    "darbhanga": ("Bihar", 26.1555, 85.9001, "severe"),
    "alappuzha": ("Kerala", 9.4981, 76.3388, "severe"),
    "dehradun": ("Uttarakhand", 30.3165, 78.0322, "medium"),
    "srinagar": ("Jammu and Kashmir", 34.0837, 74.7973, "low"),
}

# Static fill (%) used for catalog fallback observations, by baseline risk
FALLBACK_FILL_BY_RISK = {"severe": 92.0, "high": 78.0, "medium": 55.0, "low": 30.0}

REGION_RESERVOIRS = {
    "mumbai": ["Tansa", "Vihar", "Tulsi", "Vaitarna"],
    "delhi": ["Yamuna", "Bhakra"],
    "kolkata": ["Damodar Valley", "Farakka"],
    "chennai": ["Poondi", "Cholavaram", "Redhills", "Chembarambakkam"],
    "bengaluru": ["Cauvery", "Kabini", "Krishna Raja Sagara"],
    "hyderabad": ["Nagarjuna Sagar", "Srisailam"],
    "ahmedabad": ["Sardar Sarovar", "Ukai"],
    "pune": ["Khadakwasla", "Panshet", "Warasgaon"],
    "surat": ["Ukai", "Kadana"],
    "jaipur": ["Bisalpur", "Mahi Bajaj Sagar"],
    "lucknow": ["Rihand", "Obra"],
    "kanpur": ["Rihand", "Mata Tila"],
    "nagpur": ["Gosikhurd", "Totladoh"],
    "patna": ["Sone", "Kosi"],
    "indore": ["Omkareshwar", "Bargi"],
    "kochi": ["Idukki", "Mullaperiyar"],
    "guwahati": ["Kopili", "Umiam"],
}

# Reservoir stress scoring: (min value, points), checked in order
STRESS_FILL_POINTS = [(95.0, 50.0), (85.0, 30.0), (70.0, 15.0)]
STRESS_NET_INFLOW_POINTS = [(20000.0, 40.0), (10000.0, 25.0), (2000.0, 10.0)]
CRITICAL_FILL_PERCENT = 85.0
OVERFLOW_FILL_PERCENT = 95.0
HIGH_NET_INFLOW = 10000.0

# level: (min avg score, probability increase, affected population)
STRESS_LEVELS = {
    "severe": (60.0, 45, 2000000),
    "high": (40.0, 30, 1000000),
    "medium": (20.0, 15, 500000),
    "low": (0.0, 5, 100000),
}

# CWC basin reference levels (m) per state
RIVER_BASINS = {
    "Maharashtra": ("Godavari", 8.5, 4.2),
    "West Bengal": ("Hooghly", 7.8, 3.8),
    "Tamil Nadu": ("Cauvery", 6.5, 3.2),
    "Delhi": ("Yamuna", 7.5, 3.5),
    "Karnataka": ("Krishna", 9.2, 4.8),
    "Kerala": ("Periyar", 5.8, 2.9),
    "Assam": ("Brahmaputra", 12.5, 6.8),
    "Bihar": ("Ganga", 10.2, 5.1),
    "Uttar Pradesh": ("Yamuna", 8.0, 4.0),
    "Telangana": ("Krishna", 8.8, 4.5),
    "Gujarat": ("Sabarmati", 6.2, 2.8),
    "Rajasthan": ("Luni", 4.5, 2.0),
    "Madhya Pradesh": ("Narmada", 7.9, 3.9),
    "Odisha": ("Mahanadi", 8.7, 4.3),
    "Andhra Pradesh": ("Godavari", 9.1, 4.6),
    "Punjab": ("Sutlej", 6.8, 3.4),
    "Himachal Pradesh": ("Sutlej", 5.9, 2.8),
    "Uttarakhand": ("Ganga", 7.2, 3.6),
    "Jammu and Kashmir": ("Jhelum", 6.1, 2.9),
}
DEFAULT_RIVER_BASIN = ("Local River", 7.0, 3.5)
WARNING_LEVEL_FRACTION = 0.7

