"""Marketing names of Apple hardware product types."""

from __future__ import annotations

# Each family prefix maps marketing names to the model numbers that carry them.
# An empty prefix means the identifiers are written out in full.
_CATALOGUE: tuple[tuple[str, dict[str, str]], ...] = (
    (
        "",
        {
            "AirPods (1st generation)": "AirPods1,1",
            "AirPods (2nd generation)": "AirPods1,2 AirPods2,1",
            "AirPods (3rd generation)": "AirPods1,3 Audio2,1",
            "AirPods Pro": "AirPods2,2 AirPodsPro1,1 iProd8,1",
            "AirPods Max": "AirPodsMax1,1 iProd8,6",
        },
    ),
    (
        "AppleTV",
        {
            "Apple TV (1st generation)": "1,1",
            "Apple TV (2nd generation)": "2,1",
            "Apple TV (3rd generation)": "3,1 3,2",
            "Apple TV (4th generation)": "5,3",
            "Apple TV 4K": "6,2",
            "Apple TV 4K (2nd generation)": "11,1",
        },
    ),
    (
        "Watch",
        {
            "Apple Watch (1st generation)": "1,1 1,2",
            "Apple Watch Series 1": "2,6 2,7",
            "Apple Watch Series 2": "2,3 2,4",
            "Apple Watch Series 3": "3,1 3,2 3,3 3,4",
            "Apple Watch Series 4": "4,1 4,2 4,3 4,4",
            "Apple Watch Series 5": "5,1 5,2 5,3 5,4",
            "Apple Watch SE": "5,9 5,10 5,11 5,12",
            "Apple Watch Series 6": "6,1 6,2 6,3 6,4",
            "Apple Watch Series 7": "6,6 6,7 6,8 6,9",
        },
    ),
    (
        "iPad",
        {
            "iPad": "1,1",
            "iPad 2": "2,1 2,2 2,3 2,4",
            "iPad mini": "2,5 2,6 2,7",
            "iPad (3rd generation)": "3,1 3,2 3,3",
            "iPad (4th generation)": "3,4 3,5 3,6",
            "iPad Air": "4,1 4,2 4,3",
            "iPad mini 2": "4,4 4,5 4,6",
            "iPad mini 3": "4,7 4,8 4,9",
            "iPad mini 4": "5,1 5,2",
            "iPad Air 2": "5,3 5,4",
            "iPad Pro (9.7-inch)": "6,3 6,4",
            "iPad Pro (12.9-inch)": "6,7 6,8",
            "iPad (5th generation)": "6,11 6,12",
            "iPad Pro (12.9-inch) (2nd generation)": "7,1 7,2",
            "iPad Pro (10.5-inch)": "7,3 7,4",
            "iPad (6th generation)": "7,5 7,6",
            "iPad (7th generation)": "7,11 7,12",
            "iPad Pro (11-inch)": "8,1 8,2 8,3 8,4",
            "iPad Pro (12.9-inch) (3rd generation)": "8,5 8,6 8,7 8,8",
            "iPad Pro (11-inch) (2nd generation)": "8,9 8,10",
            "iPad Pro (12.9-inch) (4th generation)": "8,11 8,12",
            "iPad mini (5th generation)": "11,1 11,2",
            "iPad Air (3rd generation)": "11,3 11,4",
            "iPad (8th generation)": "11,6 11,7",
            "iPad (9th generation)": "12,1 12,2",
            "iPad Air (4th generation)": "13,1 13,2",
            "iPad Pro (11-inch) (3rd generation)": "13,4 13,5 13,6 13,7",
            "iPad Pro (12.9-inch) (5th generation)": "13,8 13,9 13,10 13,11",
            "iPad Air 5": "13,16 13,17",
            "iPad mini (6th generation)": "14,1 14,2",
        },
    ),
    (
        "iPhone",
        {
            "iPhone": "1,1",
            "iPhone 3G": "1,2",
            "iPhone 3GS": "2,1",
            "iPhone 4": "3,1 3,2 3,3",
            "iPhone 4S": "4,1",
            "iPhone 5": "5,1 5,2",
            "iPhone 5c": "5,3 5,4",
            "iPhone 5s": "6,1 6,2",
            "iPhone 6 Plus": "7,1",
            "iPhone 6": "7,2",
            "iPhone 6s": "8,1",
            "iPhone 6s Plus": "8,2",
            "iPhone SE (1st generation)": "8,4",
            "iPhone 7": "9,1 9,3",
            "iPhone 7 Plus": "9,2 9,4",
            "iPhone 8": "10,1 10,4",
            "iPhone 8 Plus": "10,2 10,5",
            "iPhone X": "10,3 10,6",
            "iPhone XS": "11,2",
            "iPhone XS Max": "11,4 11,6",
            "iPhone XR": "11,8",
            "iPhone 11": "12,1",
            "iPhone 11 Pro": "12,3",
            "iPhone 11 Pro Max": "12,5",
            "iPhone SE (2nd generation)": "12,8",
            "iPhone 12 mini": "13,1",
            "iPhone 12": "13,2",
            "iPhone 12 Pro": "13,3",
            "iPhone 12 Pro Max": "13,4",
            "iPhone 13 Pro": "14,2",
            "iPhone 13 Pro Max": "14,3",
            "iPhone 13 mini": "14,4",
            "iPhone 13": "14,5",
            "iPhone SE 3": "14,6",
            "iPhone 14": "14,7",
            "iPhone 14 Plus": "14,8",
            "iPhone 14 Pro": "15,2",
            "iPhone 14 Pro Max": "15,3",
        },
    ),
    (
        "iPod",
        {
            "iPod touch": "1,1",
            "iPod touch (2nd generation)": "2,1",
            "iPod touch (3rd generation)": "3,1",
            "iPod touch (4th generation)": "4,1",
            "iPod touch (5th generation)": "5,1",
            "iPod touch (6th generation)": "7,1",
            "iPod touch (7th generation)": "9,1",
        },
    ),
)

GENERATIONS: dict[str, str] = {
    f"{prefix}{model}": name
    for prefix, names in _CATALOGUE
    for name, models in names.items()
    for model in models.split()
}


def generation_name(product_type: str) -> str:
    """Marketing name for a product type, or an empty string if unknown."""
    if not product_type:
        return ""
    return GENERATIONS.get(product_type, "")