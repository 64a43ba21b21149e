"""The graphical game client: player smoothing, game state, rendering and the server connection."""