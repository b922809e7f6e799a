import taichi as ti


#===================================== #
#           Type Definition            #
#===================================== #
# Engine vectors are double precision whatever default_fp ti.init receives.
vec2f = ti.types.vector(2, ti.f64)
vec3f = ti.types.vector(3, ti.f64)

ZEROVEC3f = vec3f([0., 0., 0.])
