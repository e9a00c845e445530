import pytest

from trackstats.models import Track


@pytest.fixture
def tracks() -> list[Track]:
    return [
        Track(
            artist="Gorillaz", track="Feel Good Inc.", album="Demon Days",
            album_type="album", danceability=0.818, energy=0.705, liveness=0.613,
            views=693555221.0, likes=6220896, comments=169907, licensed=True,
            official_video=True, stream=1040234854, most_played_on="Spotify",
        ),
        Track(
            artist="Gorillaz", track="Rhinestone Eyes", album="Plastic Beach",
            album_type="album", danceability=0.676, energy=0.703, liveness=0.0765,
            views=72011645.0, likes=1079128, comments=31003, licensed=True,
            official_video=True, stream=310083733, most_played_on="Youtube",
        ),
        Track(
            artist="Gorillaz", track="New Gold", album="New Gold",
            album_type="single", danceability=0.695, energy=0.923, liveness=0.0984,
            views=8435055.0, likes=282142, comments=7399, licensed=False,
            official_video=True, stream=63063467, most_played_on="Spotify",
        ),
        Track(
            artist="Red Hot Chili Peppers", track="Californication",
            album="Californication", album_type="ALBUM", danceability=0.592,
            energy=0.767, liveness=0.127, views=1000000000.0, likes=7000000,
            comments=None, licensed=True, official_video=True,
            stream=1500000000, most_played_on="Youtube",
        ),
        Track(
            artist="Red Hot Chili Peppers", track="Otherside", album="Californication",
            album_type="album", danceability=0.356, energy=0.838, liveness=0.0,
            views=None, likes=None, comments=None, licensed=False,
            official_video=False, stream=None, most_played_on="Spotify",
        ),
    ]
