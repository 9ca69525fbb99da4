"""
Ejemplo básico de uso del intérprete sin interfaz gráfica.

Demuestra cómo:
- Construir un guion con ScriptBuilder
- Avanzar paso a paso con execute_step()
- Manejar elecciones a través del ChoiceRegistry
- Consultar la afinidad y las capas del escenario

Ejecutar con: python examples/python/basic_engine.py
"""

from __future__ import annotations

from pathlib import Path

from vnscript import ScriptBuilder, ScriptEngine, Stage


def build_script():
    builder = ScriptBuilder()
    builder.background(0, "bg/sala.png")
    builder.character(1, "center", "chara/ava.png")
    builder.dialogue("Hola, bienvenido.", speaker="Ava")
    builder.choice([("Saludar", "amable"), ("Ignorar", "fin")])
    builder.label("amable")
    builder.affection("Ava", 15)
    builder.dialogue("¡Qué amable!", speaker="Ava")
    builder.label("fin")
    builder.if_affection("Ava", ">=", 60)
    builder.dialogue("Nos vemos mañana.", speaker="Ava")
    builder.else_()
    builder.dialogue("Hasta luego.", speaker="Ava")
    builder.endif()
    return builder.build()


def main() -> None:
    print("=== Demo del intérprete de guiones ===\n")

    # Las imágenes del ejemplo no existen en disco: aceptamos cualquier ruta
    stage = Stage(resolver=Path)
    engine = ScriptEngine(stage)
    engine.load_program(build_script())

    while engine.execute_step():
        if engine.waiting_for_input:
            print(f"   {engine.current_text}")
            stage.complete_text()
            engine.advance()
        elif engine.waiting_for_choice:
            options = engine.choices.options
            for i, option in enumerate(options):
                print(f"   [{i}] {option.text}")
            # Elegir opción 0 (amable)
            engine.choices.select(0)

    print(f"\nAfinidad de Ava: {engine.affection.get('Ava')}")
    print(f"Capas: {[(layer.image, layer.character) for layer in stage.layers]}")
    print("\n=== Demo completada ===")


if __name__ == "__main__":
    main()
