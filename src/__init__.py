# Copyright (c) 2023, multiscale geomechanics lab, Zhejiang University
# This file is from the GeoTaichi project, released under the GNU General Public License v3.0

__author__ = "Shi-Yihao, Guo-Ning"
__version__ = "0.1.0"
__license__ = "GNU License"
__description__ = 'Granular Column Assembly and Two-Stage DEM Staging'


def DEM(title=None, log=True):
    if title is None:
        title = __description__ 
        
    from src.dem.mainDEM import DEM 
    return DEM(title=title, log=log)


def Column(params, dem=None, nproc=1, log=True):
    if dem is None:
        dem = DEM(log=log)

    from src.column.StageOrchestrator import StageOrchestrator
    return StageOrchestrator(dem, params, nproc=nproc, log=log)
