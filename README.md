# fighterserver

Building blocks for the server side of a multiplayer side-scrolling
fighting game. Players move around a large world and attack one another,
and each player sees only the characters near them.

The package uses only the standard library.

## Modules

- `fighterserver.protocol` handles the binary wire protocol. Every packet
  starts with a three-byte `PacketHeader`: the code `0x89`, the payload
  size and the packet type. `PacketHeader.pack` and `PacketHeader.unpack`
  convert a header to and from its bytes. A fixed little-endian payload
  follows the header, and its layout depends on the `PacketType`.
  `MoveDirection` lists the eight movement directions.
  - `payload_format` gives the `struct` format of a payload.
  - `payload_size` gives the payload's length.
  - `build_packet` encodes a complete packet from its field values.
  - `parse_packet` decodes a packet into `(PacketType, fields)`. It raises
    `ValueError` for a bad code, an unknown type or a wrong size.
- `fighterserver.sector_manager` splits the world into a grid of `Sector`s.
  - `SectorManager.sector_index` maps a world position to a
    `(column, row)` sector.
  - `SectorManager.register_object` places a `SectorObject` in the sector
    that matches its position.
  - `SectorManager.delete_object` removes the object from its sector.
  - When an object's `current_sector` differs from its `previous_sector`,
    `SectorManager.calculate_sector_changes` finds the sectors that leave
    and enter its view with `sector_changes`. It calls the `on_delete`
    and `on_create` callbacks with `(moving_object, other_object)` for
    every object in those sectors, then moves the object to its new
    sector. Only moves of one sector, straight or diagonal, produce view
    changes.
- `fighterserver.session` manages connected clients.
  - A `Session` holds one client: its socket, IP, port, receive and send
    queues (`bytearray`s), and the game object attached with
    `register_object`.
  - `SessionManager.create_session` registers an accepted socket.
  - `unicast_data` and `unicast_packet` queue bytes for one session.
  - `broadcast_data` and `broadcast_packet` queue bytes for every live
    session except one you name.
  - If `send_capacity` is set and a send queue would overflow, that
    session is marked dead.
  - `notify_disconnected` marks a session dead.
  - `update` removes dead sessions. For each one it calls `on_disconnect`
    and closes the socket, and it returns the removed sessions.
- `fighterserver.network` handles sockets and addresses.
  - `SocketManager.start_server` opens a TCP or UDP socket
    (`ProtocolType`) and binds it. TCP sockets also listen. Passing
    `OPTION_NONBLOCKING` makes the socket non-blocking.
  - `SocketManager.accept` returns `(socket, address)`, or `None` if no
    client is waiting.
  - `SocketManager.cleanup` closes the socket. `SocketManager` is also a
    context manager that closes the socket on exit.
  - `format_ip`, `format_port` and `domain_to_ip` are address helpers.
- `fighterserver.timer` provides `FrameTimer`, which paces a loop at a
  fixed frame rate.
  - `start` sets the reference time.
  - `check_frame` returns `True` when a frame is due, and advances server
    time by exactly one frame each time.
  - With `measure_jitter=True`, each call also records how far the time
    between calls strays from one frame.
  - `report_jitter_stats` returns the gathered `JitterStats`, or `None` if
    nothing was measured, and resets the figures.
  - A custom millisecond `clock` can be supplied.

## Examples

Encode and decode a packet:

```python
from fighterserver.protocol import PacketType, build_packet, parse_packet

raw = build_packet(PacketType.SC_MOVE_START, 7, 4, 120, 300)
kind, fields = parse_packet(raw)   # PacketType.SC_MOVE_START, (7, 4, 120, 300)
```

Track an object across sectors:

```python
from fighterserver.sector_manager import SectorManager, SectorObject

def entered(mover, other):
    print(f"{mover.object_id} now sees {other.object_id}")

grid = SectorManager(3, 3, left=0, top=0, right=300, bottom=300, on_create=entered)
hero = SectorObject(1, x=50, y=50)
grid.register_object(hero)                 # sector (0, 0)

hero.x = 150
hero.previous_sector = hero.current_sector
hero.current_sector = grid.sector_index(hero.x, hero.y)   # (1, 0)
grid.calculate_sector_changes(hero)        # True
```

`calculate_sector_changes` does not update `previous_sector`. The caller
records it before setting the new `current_sector`, as shown above.

## Packet reference

| Type | Value | Direction | Payload |
|------|------:|-----------|---------|
| `SC_CREATE_MY_CHARACTER` | 0 | server → client | id, direction, x, y, hp |
| `SC_CREATE_OTHER_CHARACTER` | 1 | server → client | id, direction, x, y, hp |
| `SC_DELETE_CHARACTER` | 2 | server → client | id |
| `CS_MOVE_START` | 10 | client → server | direction, x, y |
| `SC_MOVE_START` | 11 | server → client | id, direction, x, y |
| `CS_MOVE_STOP` | 12 | client → server | direction, x, y |
| `SC_MOVE_STOP` | 13 | server → client | id, direction, x, y |
| `CS_ATTACK1` / `2` / `3` | 20 / 22 / 24 | client → server | direction, x, y |
| `SC_ATTACK1` / `2` / `3` | 21 / 23 / 25 | server → client | id, direction, x, y |
| `SC_DAMAGE` | 30 | server → client | attacker id, victim id, victim hp |
| `CS_SYNC` | 250 | client → server | x, y |
| `SC_SYNC` | 251 | server → client | id, x, y |
| `CS_ECHO` | 252 | client → server | time |
| `SC_ECHO` | 253 | server → client | time |

Ids and times are 32-bit values, coordinates are 16-bit values, and
directions and hp are single bytes.

## What it does not do

This is a set of components, not a runnable server. It has no command and
no main loop, and it does not read from or write to client sockets. The
session queues are plain byte buffers that your own code fills from and
drains to the network. It contains no game rules either: no movement,
attack ranges, damage or character state. You decide what each packet
means and what the sector callbacks send.