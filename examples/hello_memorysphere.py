import logging
import time

import memorysphere


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    srv = memorysphere.run(port=57794)
    client = srv if isinstance(srv, memorysphere.MemorySphereClient) else srv.client()

    client.set_viewport(1280, 800)
    ids = client.ingest(
        [
            "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=600",
            "https://images.unsplash.com/photo-1511497584788-876760111969?w=600",
            "https://images.unsplash.com/photo-1449824913935-59a10b8d2000?w=600",
        ]
    )
    print("ingested:", ids)

    # Spin the world a little and let it coast.
    client.send_input({"type": "pointerdown", "x": 400, "y": 300, "timestamp": 0.0})
    client.send_input({"type": "pointermove", "x": 460, "y": 320, "timestamp": 0.016})
    client.send_input({"type": "pointerup", "x": 460, "y": 320, "timestamp": 0.02})
    while client.tick(1 / 60):
        pass
    print("front-facing:", client.get_rotation()["frontFacing"])

    client.set_mode("gallery")
    client.navigate("next")
    focused = client.get_scene()["focusedIndex"]
    print("gallery focus:", focused)

    try:
        while True:
            time.sleep(3600)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
