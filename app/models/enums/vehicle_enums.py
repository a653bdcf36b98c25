from enum import Enum


class VehicleType(str, Enum):
    pessoal = "pessoal"
    empresa = "empresa"
    financiado = "financiado"
    alugado = "alugado"


class FuelType(str, Enum):
    gasolina = "gasolina"
    etanol = "etanol"
    flex = "flex"
    diesel = "diesel"
    gas = "gas"
    eletrico = "eletrico"
    hibrido = "hibrido"
