"""Terrain Analysis - Elevation profiles and earthwork volumes on DEM rasters.

A small numerical engine behind an interactive geospatial viewer:
- Nearest-cell DEM sampling with projection and no-data handling
- Adaptive elevation profiles along drawn lines
- Cut/fill volumes inside drawn polygons against four base-plane methods

Modules:
    core: Algorithms (geo calculations, DEM sampling, profiles, volumes, GeoTIFF loading)
    model: Data structures (DemData, Profile, BasePlane, VolumeResult, AnalysisFailure)
    report: Presentation helpers (Plotly profile chart, volume summary)

Example:
    from terrain_analysis.core import ProfileExtractor, VolumeEngine, load_dem

    dem = load_dem("terrain.tif")
    profile = ProfileExtractor.extract(line=line_feature, dem=dem)
    volume = VolumeEngine().compute(polygon=polygon_feature, dem=dem, method="bestFit")
"""
