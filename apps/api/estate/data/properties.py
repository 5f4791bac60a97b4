"""Built-in property catalog shipped with the listing site."""
from __future__ import annotations

from ..schemas.properties import Property, PropertyMedia

DEFAULT_PROPERTY_IMAGE = "https://placehold.co/800x600?text=Property"

_PROPERTY_1 = "/assets/property-1.jpg"
_PROPERTY_2 = "/assets/property-2.jpg"
_PROPERTY_3 = "/assets/property-3.jpg"
_FLOORPLAN_1 = "/assets/property-1-floorplan.jpg"
_BUILDING_GYM = "/assets/building-gym.jpg"
_BUILDING_LOBBY = "/assets/building-lobby.jpg"
_BUILDING_POOL = "/assets/building-pool.jpg"

_DEMO_VIDEO = "https://www.youtube.com/embed/dQw4w9WgXcQ"
_LONG_TERM = "Long term rent, usual tenancy contract"


BUILT_IN_PROPERTIES: tuple[Property, ...] = (
    Property(
        id="sky-tower-penthouse",
        image=_PROPERTY_1,
        name="Sky Tower Penthouse",
        neighborhood="Downtown Dubai",
        subcluster="Business Bay",
        bedrooms=4,
        bathrooms=5,
        sqft=4500,
        price="AED 15,000,000",
        rent_price_per_year="AED 450,000",
        price_details=_LONG_TERM,
        visible=True,
        maids_room=True,
        labels=["Luxury Amenities", "City View"],
        description=(
            "Experience unparalleled luxury in this stunning penthouse located in the heart of "
            "Downtown Dubai. Floor-to-ceiling windows offer breathtaking views of the Burj Khalifa "
            "and the Dubai Fountain. This residence features premium Italian marble flooring, a "
            "state-of-the-art smart home system, and designer fixtures throughout."
        ),
        location_description=(
            "Downtown Dubai is the epitome of modern luxury living. Home to the Burj Khalifa and "
            "the Dubai Mall, the neighborhood offers unmatched access to world-class dining, "
            "entertainment, and shopping, with major business districts within easy reach."
        ),
        video_url=_DEMO_VIDEO,
        floorplans=[
            PropertyMedia(
                url=_FLOORPLAN_1,
                title="Spacious 4-bedroom penthouse layout",
                description="Open-plan living areas with private elevator access.",
            ),
        ],
        development_images=[
            PropertyMedia(url=_BUILDING_GYM, title="Fitness Center", description="State-of-the-art gym with panoramic city views"),
            PropertyMedia(url=_BUILDING_LOBBY, title="Grand Lobby", description="Elegant entrance with 24/7 concierge service"),
            PropertyMedia(url=_BUILDING_POOL, title="Infinity Pool", description="Rooftop infinity pool overlooking Dubai skyline"),
        ],
        amenities=[
            "24/7 Concierge Service",
            "Infinity Pool",
            "Private Gym",
            "Spa & Wellness Center",
            "Valet Parking",
            "Business Center",
        ],
        features=[
            "Smart Home Technology",
            "Italian Marble Flooring",
            "Miele Kitchen Appliances",
            "Private Elevator Access",
            "Walk-in Closets",
            "Wine Cellar",
        ],
    ),
    Property(
        id="palm-residence",
        image=_PROPERTY_2,
        name="Palm Residence",
        neighborhood="Palm Jumeirah",
        subcluster="Golden Mile",
        bedrooms=5,
        bathrooms=6,
        sqft=6200,
        price="AED 22,500,000",
        rent_price_per_year="AED 680,000",
        price_details=_LONG_TERM,
        visible=True,
        maids_room=True,
        labels=["Beach Access", "Private Pool"],
        description=(
            "Discover paradise in this exceptional beachfront residence on Palm Jumeirah. The "
            "property offers direct beach access, a private infinity pool, and panoramic views of "
            "the Arabian Gulf, with an open-plan design that blends indoor and outdoor living."
        ),
        location_description=(
            "Palm Jumeirah is Dubai's iconic man-made island. The address offers an exclusive "
            "island lifestyle with pristine beaches, luxury hotels, and world-class restaurants, "
            "minutes away from Dubai Marina and the city center."
        ),
        video_url=_DEMO_VIDEO,
        development_images=[
            PropertyMedia(url=_BUILDING_POOL, title="Beach Club", description="Exclusive beach club with private cabanas"),
            PropertyMedia(url=_BUILDING_GYM, title="Wellness Center", description="Premium spa and wellness facilities"),
            PropertyMedia(url=_BUILDING_LOBBY, title="Residents Lounge", description="Elegant communal spaces for socializing"),
        ],
        amenities=[
            "Private Beach Access",
            "Infinity Pool",
            "24/7 Security",
            "Kids Play Area",
            "BBQ Area",
            "Landscaped Gardens",
        ],
        features=[
            "Floor-to-Ceiling Windows",
            "High-End Kitchen",
            "Master Suite with Sea View",
            "Home Theater",
            "Smart Home System",
            "Covered Parking for 3 Cars",
        ],
    ),
    Property(
        id="emirates-hills-villa",
        image=_PROPERTY_3,
        name="Emirates Hills Villa",
        neighborhood="Emirates Hills",
        subcluster="Xora",
        bedrooms=6,
        bathrooms=7,
        sqft=8000,
        price="AED 28,000,000",
        rent_price_per_year="AED 850,000",
        price_details=_LONG_TERM,
        visible=True,
        maids_room=False,
        labels=["Golf Course View", "Premium Location"],
        description=(
            "Nestled in the prestigious Emirates Hills community, this contemporary villa offers "
            "spectacular golf course views and ultimate privacy, with expansive glass walls and a "
            "temperature-controlled pool."
        ),
        location_description=(
            "Emirates Hills is Dubai's most exclusive gated community. It surrounds the Montgomerie "
            "Golf Course and offers privacy, security, and access to premium international schools."
        ),
        video_url=_DEMO_VIDEO,
        floorplans=[
            PropertyMedia(
                url=_FLOORPLAN_1,
                title="Luxury villa floor plan",
                description="Six bedrooms with cinema room and panoramic golf course views.",
            ),
        ],
        amenities=[
            "Golf Course Access",
            "Private Pool",
            "Tennis Court",
            "Maid's Room",
            "Driver's Room",
            "Landscaped Garden",
        ],
        features=[
            "Contemporary Architecture",
            "Premium Finishes Throughout",
            "Gourmet Kitchen",
            "Home Office",
            "Cinema Room",
            "4-Car Garage",
        ],
    ),
)
