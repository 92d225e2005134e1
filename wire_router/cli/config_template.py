"""
Configuration template for wire-router
"""

MINIMAL_CONFIG_TEMPLATE = """# Wire Router Configuration
# ============================================================================
# Every value below is the default; delete what you don't need to change.
# Values may reference environment variables: "${VAR}" or "${VAR:-default}"

version: 1
project: "my-diagram"

# Path planning
# ----------------------------------------------------------------------------
routing:
  grid_size: 20                 # Grid cell size in canvas units
  bend_penalty: 2.5             # Extra cost per direction change (grid cells)
  length_weight: 1.0            # Cost per grid step
  wire_crossing_penalty: 5.0    # Extra cost for running over another wire
  obstacle_buffer: 10           # Padding around components
  max_iterations: 10000         # Search expansions before giving up
  routing_strategy: "balanced"  # shortest | minimal_bends | balanced | grid_aligned
  dijkstra_search_margin: 10    # Cells around the endpoints Dijkstra explores
  auto_canvas_margin: 100       # Margin of the canvas derived from the layout

# Route scoring
# ----------------------------------------------------------------------------
quality:
  bend_factor: 0.1              # Quality lost per bend
  fallback_quality: 0.1         # Quality of the direct fallback segment

# Collision detection
# ----------------------------------------------------------------------------
collision:
  wire_buffer: 5                # Lateral tolerance for overlapping wires
  component_buffer: 10          # Clearance around components
  endpoint_tolerance: 20        # Distance marking a component as a wire endpoint
  junction_tolerance: 5         # Shared endpoint distance (intentional junction)
  crossing_severity: 0.8
  overlap_severity: 1.0
  junction_severity: 0.1
  high_threshold: 0.7
  medium_threshold: 0.3

# Junctions
# ----------------------------------------------------------------------------
junctions:
  tolerance: 2

# Logging
# ----------------------------------------------------------------------------
logging:
  level: "INFO"                 # DEBUG | INFO | WARNING | ERROR
  # file: "wire_router.log"
"""
