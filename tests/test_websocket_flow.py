from collections import Counter

import pytest

pytest.importorskip("httpx", reason="httpx requis pour les tests client FastAPI")

from fastapi.testclient import TestClient

from roomhub.config.settings import settings
from roomhub.main import app
from roomhub.services.coordinator import COORDINATOR
from roomhub.services.relay import RELAYED_EVENTS, SCOPE_ALL


@pytest.fixture
def client():
    COORDINATOR.reset()
    with TestClient(app) as c:
        yield c
    COORDINATOR.reset()


def _hello(ws) -> str:
    first = ws.receive_json()
    assert first["type"] == "connected"
    return first["payload"]["socketId"]


def _until(ws, frame_type: str) -> dict:
    """Lit les trames jusqu'à celle du type demandé."""
    while True:
        frame = ws.receive_json()
        if frame["type"] == frame_type:
            return frame


def _create_room(ws) -> str:
    ws.send_json({"type": "room:create", "ack": "c1"})
    assert ws.receive_json() == {"type": "room:players", "payload": []}
    response = ws.receive_json()
    assert response["type"] == "room:create:response"
    ack = ws.receive_json()
    assert ack["type"] == "ack" and ack["ack"] == "c1"
    assert ack["payload"]["ok"] is True
    assert ack["payload"]["roomId"] == response["payload"]["roomId"]
    return ack["payload"]["roomId"]


def test_join_unknown_pin_is_rejected(client):
    with client.websocket_connect("/ws") as ws:
        _hello(ws)
        ws.send_json({"type": "room:join", "payload": {"roomId": "ZZZZZZ"}, "ack": 1})
        ack = ws.receive_json()
        assert ack == {
            "type": "ack",
            "ack": 1,
            "payload": {"ok": False, "error": "PIN invalide", "code": "invalid_room"},
        }


def test_room_lifecycle_with_obstacle_repartition(client):
    catalog = settings.OBSTACLE_CATALOG
    with client.websocket_connect("/ws") as unity:
        unity_id = _hello(unity)
        pin = _create_room(unity)

        with client.websocket_connect("/ws") as guide_b:
            b_id = _hello(guide_b)

            with client.websocket_connect("/ws") as guide_a:
                a_id = _hello(guide_a)
                guide_a.send_json({"type": "room:join", "payload": {"roomId": pin}, "ack": "j"})
                roster = _until(guide_a, "room:players")["payload"]
                assert [p["socketId"] for p in roster] == [unity_id, a_id]
                assert [p["role"] for p in roster] == ["unity", "guide"]
                assigned = _until(guide_a, "obstacles:assigned")["payload"]
                assert assigned["count"] == len(catalog)
                ack = _until(guide_a, "ack")
                assert ack["payload"]["ok"] is True
                assert len(ack["payload"]["players"]) == 2
                assert len(_until(unity, "room:players")["payload"]) == 2

                guide_b.send_json({"type": "room:join", "payload": {"roomId": pin}})
                roster = _until(guide_b, "room:players")["payload"]
                assert [p["socketId"] for p in roster] == [unity_id, a_id, b_id]
                share_b = _until(guide_b, "obstacles:assigned")["payload"]["obstacleTypes"]
                share_a = _until(guide_a, "obstacles:assigned")["payload"]["obstacleTypes"]
                assert {len(share_a), len(share_b)} == {3, 4}
                assert Counter(share_a + share_b) == Counter(catalog)

            # A se déconnecte : B récupère tout le catalogue
            roster = _until(guide_b, "room:players")["payload"]
            assert [p["socketId"] for p in roster] == [unity_id, b_id]
            solo = _until(guide_b, "obstacles:assigned")["payload"]
            assert sorted(solo["obstacleTypes"]) == sorted(catalog)

    assert COORDINATOR.stats()["rooms"] == 0


def test_names_and_launch(client):
    with client.websocket_connect("/ws") as unity, client.websocket_connect("/ws") as guide:
        _hello(unity)
        _hello(guide)
        pin = _create_room(unity)

        guide.send_json({"type": "room:join", "payload": {"roomId": pin}, "ack": "j"})
        _until(guide, "ack")

        unity.send_json({"type": "player:create", "payload": "Alex", "ack": "n1"})
        assert _until(unity, "ack")["payload"] == {"ok": True, "pseudo": "Alex"}

        guide.send_json({"type": "player:create", "payload": "alex", "ack": "n2"})
        refused = _until(guide, "ack")["payload"]
        assert refused["ok"] is False
        assert refused["error"] == "Pseudo déjà pris"

        guide.send_json({"type": "player:create", "payload": "", "ack": "n3"})
        assert _until(guide, "ack")["payload"]["error"] == "Pseudo requis"

        guide.send_json({"type": "game:launch", "ack": "l1"})
        assert _until(guide, "ack")["payload"]["error"] == "Seul le joueur Unity peut lancer la partie"

        unity.send_json({"type": "game:launch", "ack": "l2"})
        assert _until(unity, "game:started")["payload"] == {"roomId": pin}
        assert _until(unity, "ack")["payload"] == {"ok": True}
        assert _until(guide, "game:started")["payload"] == {"roomId": pin}


def test_player_create_without_room(client):
    with client.websocket_connect("/ws") as ws:
        _hello(ws)
        ws.send_json({"type": "player:create", "payload": "Alex", "ack": 9})
        assert ws.receive_json()["payload"] == {
            "ok": False,
            "error": "Room non trouvée pour ce joueur",
            "code": "no_room",
        }
        ws.send_json({"type": "game:launch", "ack": 10})
        assert ws.receive_json()["payload"]["error"] == "Joueur non trouvé"


def test_position_updates_reach_room(client):
    with client.websocket_connect("/ws") as unity, client.websocket_connect("/ws") as guide:
        _hello(unity)
        guide_id = _hello(guide)
        pin = _create_room(unity)
        guide.send_json({"type": "room:join", "payload": {"roomId": pin}, "ack": "j"})
        _until(guide, "ack")

        guide.send_json({
            "type": "player:position",
            "payload": {"roomId": pin, "pseudo": "G", "position": {"x": 3, "y": 4}, "timestamp": 12},
        })
        update = _until(unity, "player:position:update")["payload"]
        assert update["socketId"] == guide_id
        assert update["position"] == {"x": 3, "y": 4}
        assert _until(guide, "player:position:update")["payload"] == update


def test_signaling_relay_skips_sender(client):
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
        _hello(a)
        _hello(b)
        a.send_json({"type": "webrtc-offer", "payload": {"sdp": "v=0"}})
        a.send_json({"type": "message", "payload": "salut"})

        assert b.receive_json() == {"type": "webrtc-offer", "payload": {"sdp": "v=0"}}
        assert b.receive_json() == {"type": "message", "payload": "salut"}
        # l'expéditeur ne reçoit que le message de chat
        assert a.receive_json() == {"type": "message", "payload": "salut"}


def test_signaling_relay_to_single_peer(client):
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b, \
            client.websocket_connect("/ws") as c:
        _hello(a)
        b_id = _hello(b)
        _hello(c)
        a.send_json({"type": "webrtc-answer", "payload": {"sdp": "x"}, "to": b_id})
        a.send_json({"type": "message", "payload": "fin"})

        assert b.receive_json()["type"] == "webrtc-answer"
        assert c.receive_json() == {"type": "message", "payload": "fin"}


def test_voice_guides_directory(client):
    with client.websocket_connect("/ws") as watcher:
        _hello(watcher)
        with client.websocket_connect("/ws") as guide:
            _hello(guide)
            guide.send_json({"type": "joinAsGuide", "payload": "Alice"})
            assert _until(watcher, "guidesUpdate")["payload"] == ["Alice"]
        assert _until(watcher, "guidesUpdate")["payload"] == []


def test_unknown_event_and_garbage(client):
    with client.websocket_connect("/ws") as ws:
        _hello(ws)
        ws.send_text("pas du json")
        ws.send_json({"type": "does:not:exist"})
        error = ws.receive_json()
        assert error == {"type": "error", "error": "unknown event", "received": "does:not:exist"}


@pytest.mark.parametrize("event,scope", sorted(RELAYED_EVENTS.items()))
def test_every_relayed_event_is_forwarded_verbatim(client, event, scope):
    payload = {"blob": [1, 2, 3], "nested": {"k": "v"}}
    with client.websocket_connect("/ws") as a, client.websocket_connect("/ws") as b:
        _hello(a)
        _hello(b)
        a.send_json({"type": event, "payload": payload})

        assert b.receive_json() == {"type": event, "payload": payload}
        if scope == SCOPE_ALL:
            assert a.receive_json() == {"type": event, "payload": payload}
        else:
            a.send_json({"type": "message", "payload": "marqueur"})
            assert a.receive_json() == {"type": "message", "payload": "marqueur"}


def test_oversized_frame_is_dropped(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_MESSAGE_BYTES", 128)
    with client.websocket_connect("/ws") as ws:
        _hello(ws)
        ws.send_json({"type": "player:create", "payload": "x" * 500, "ack": "big"})
        ws.send_json({"type": "player:create", "payload": "", "ack": "small"})

        # la grosse trame n'a produit aucune réponse, la socket reste utilisable
        ack = ws.receive_json()
        assert ack["type"] == "ack"
        assert ack["ack"] == "small"
        assert ack["payload"]["error"] == "Pseudo requis"
