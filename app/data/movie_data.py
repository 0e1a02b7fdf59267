# Seed catalog used by POST /api/movies/import
# backend/app/data/movie_data.py

from typing import Any, Dict, List

_DEFAULT_CASTS = [
    {"name": "Lead Actor", "image": "https://images.streamflix.example/casts/lead.jpg"},
    {"name": "Supporting Actor", "image": "https://images.streamflix.example/casts/support.jpg"},
]

MOVIES_DATA: List[Dict[str, Any]] = [
    {
        "name": "Skyline Drift",
        "desc": "A disgraced street racer takes one last job hauling stolen prototypes across three borders.",
        "titleImage": "https://images.streamflix.example/titles/skyline-drift.jpg",
        "image": "https://images.streamflix.example/posters/skyline-drift.jpg",
        "category": "Action",
        "language": "English",
        "year": 2021,
        "time": 128,
        "video": "https://videos.streamflix.example/skyline-drift.mp4",
        "rate": 4,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "The Quiet Orchard",
        "desc": "Three siblings return to their late mother's farm and uncover the debts she never spoke of.",
        "titleImage": "https://images.streamflix.example/titles/quiet-orchard.jpg",
        "image": "https://images.streamflix.example/posters/quiet-orchard.jpg",
        "category": "Drama",
        "language": "English",
        "year": 2019,
        "time": 112,
        "video": "https://videos.streamflix.example/quiet-orchard.mp4",
        "rate": 4.5,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Moonlight Protocol",
        "desc": "A lunar mining crew loses contact with Earth the night their station AI starts rewriting itself.",
        "titleImage": "https://images.streamflix.example/titles/moonlight-protocol.jpg",
        "image": "https://images.streamflix.example/posters/moonlight-protocol.jpg",
        "category": "Sci-Fi",
        "language": "English",
        "year": 2022,
        "time": 135,
        "video": "https://videos.streamflix.example/moonlight-protocol.mp4",
        "rate": 3.5,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Pan y Sal",
        "desc": "A baker in Valparaiso enters a national competition to save the shop her grandfather opened.",
        "titleImage": "https://images.streamflix.example/titles/pan-y-sal.jpg",
        "image": "https://images.streamflix.example/posters/pan-y-sal.jpg",
        "category": "Comedy",
        "language": "Spanish",
        "year": 2020,
        "time": 98,
        "video": "https://videos.streamflix.example/pan-y-sal.mp4",
        "rate": 4,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Hollow Creek",
        "desc": "A podcast team investigating a decades-old disappearance finds the town still keeping score.",
        "titleImage": "https://images.streamflix.example/titles/hollow-creek.jpg",
        "image": "https://images.streamflix.example/posters/hollow-creek.jpg",
        "category": "Horror",
        "language": "English",
        "year": 2018,
        "time": 104,
        "video": "https://videos.streamflix.example/hollow-creek.mp4",
        "rate": 3,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Paper Lanterns",
        "desc": "Two pen pals who never met plan a reunion in Kyoto, twenty years after their last letter.",
        "titleImage": "https://images.streamflix.example/titles/paper-lanterns.jpg",
        "image": "https://images.streamflix.example/posters/paper-lanterns.jpg",
        "category": "Romance",
        "language": "Japanese",
        "year": 2021,
        "time": 117,
        "video": "https://videos.streamflix.example/paper-lanterns.mp4",
        "rate": 5,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Iron Tide",
        "desc": "A coast guard captain must choose between orders and her crew when a storm traps a tanker.",
        "titleImage": "https://images.streamflix.example/titles/iron-tide.jpg",
        "image": "https://images.streamflix.example/posters/iron-tide.jpg",
        "category": "Action",
        "language": "English",
        "year": 2023,
        "time": 121,
        "video": "https://videos.streamflix.example/iron-tide.mp4",
        "rate": 3.5,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Little Comet",
        "desc": "An animated story about a stray comet that wants to become a star before it burns out.",
        "titleImage": "https://images.streamflix.example/titles/little-comet.jpg",
        "image": "https://images.streamflix.example/posters/little-comet.jpg",
        "category": "Animation",
        "language": "French",
        "year": 2017,
        "time": 89,
        "video": "https://videos.streamflix.example/little-comet.mp4",
        "rate": 4.5,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Ledger",
        "desc": "A junior accountant discovers the firm's biggest client does not exist.",
        "titleImage": "https://images.streamflix.example/titles/ledger.jpg",
        "image": "https://images.streamflix.example/posters/ledger.jpg",
        "category": "Thriller",
        "language": "English",
        "year": 2020,
        "time": 109,
        "video": "https://videos.streamflix.example/ledger.mp4",
        "rate": 4,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Northbound",
        "desc": "A road trip documentary following the last mail train route through the Canadian tundra.",
        "titleImage": "https://images.streamflix.example/titles/northbound.jpg",
        "image": "https://images.streamflix.example/posters/northbound.jpg",
        "category": "Documentary",
        "language": "English",
        "year": 2016,
        "time": 94,
        "video": "https://videos.streamflix.example/northbound.mp4",
        "rate": 3,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
    {
        "name": "Red Harbour",
        "desc": "A retired detective is pulled back in when a shipping container washes up with his old case file.",
        "titleImage": "https://images.streamflix.example/titles/red-harbour.jpg",
        "image": "https://images.streamflix.example/posters/red-harbour.jpg",
        "category": "Thriller",
        "language": "English",
        "year": 2022,
        "time": 126,
        "video": "https://videos.streamflix.example/red-harbour.mp4",
        "rate": 4.5,
        "numberOfReviews": 0,
        "casts": _DEFAULT_CASTS,
    },
]
